"""Read a role and its full policy set from the source account."""

from typing import List, Optional

import structlog

from .errors import PolicyFetchFailed, PolicyListFailed, RoleFetchFailed
from .models import InlinePolicy, ManagedPolicyRef, RoleSpec
from .pagination import Page, collect_pages

logger = structlog.get_logger(__name__)


class RoleReader:
    """Reads role metadata and policies through a source IAM client.

    Usage:
        reader = RoleReader(source_iam)
        spec = reader.fetch_role("app-role")
        inline = reader.fetch_inline_policies("app-role")
        managed = reader.fetch_managed_policies("app-role")
    """

    def __init__(self, iam_client):
        """Initialize with the source IAM client.

        Args:
            iam_client: boto3 IAM client for the source account
        """
        self.iam = iam_client

    def fetch_role(self, role_name: str) -> RoleSpec:
        """Fetch the source role.

        Raises:
            RoleFetchFailed: If the role does not exist or the call fails
        """
        logger.info("Fetching source role", role_name=role_name)
        try:
            response = self.iam.get_role(RoleName=role_name)
            spec = RoleSpec.from_response(response["Role"])
        except Exception as e:
            logger.error("Failed to fetch source role", role_name=role_name, error=str(e))
            raise RoleFetchFailed(role_name, e) from e

        logger.info("Source role loaded", role_name=role_name, path=spec.path, tags=len(spec.tags))
        return spec

    def fetch_inline_policy_names(self, role_name: str) -> List[str]:
        """List the names of all inline policies of a role.

        Raises:
            PolicyListFailed: If any page of the listing fails
        """
        logger.info("Fetching inline policy names", role_name=role_name)

        def fetch(marker: Optional[str]) -> Page[str]:
            kwargs = {"RoleName": role_name}
            if marker:
                kwargs["Marker"] = marker
            return Page.from_marker_response(self.iam.list_role_policies(**kwargs), "PolicyNames")

        try:
            names = collect_pages(fetch, label="inline policy names")
        except Exception as e:
            logger.error("Failed to fetch inline policy names", role_name=role_name, error=str(e))
            raise PolicyListFailed(role_name, "inline policy names", e) from e

        logger.info("Loaded inline policy names", role_name=role_name, count=len(names))
        return names

    def fetch_inline_policy_bodies(self, role_name: str, names: List[str]) -> List[InlinePolicy]:
        """Fetch the documents of the named inline policies, one at a time.

        The first failure aborts the remaining fetches and nothing is returned.

        Raises:
            PolicyFetchFailed: If any single policy cannot be fetched
        """
        policies = []
        for name in names:
            try:
                response = self.iam.get_role_policy(RoleName=role_name, PolicyName=name)
                policies.append(InlinePolicy.from_response(response))
            except Exception as e:
                logger.error("Failed to fetch inline policy", role_name=role_name, policy_name=name, error=str(e))
                raise PolicyFetchFailed(name, e) from e
            logger.debug("Fetched inline policy", role_name=role_name, policy_name=name)

        logger.info("Loaded inline policies", role_name=role_name, count=len(policies))
        return policies

    def fetch_inline_policies(self, role_name: str) -> List[InlinePolicy]:
        """Fetch all inline policies of a role (names, then documents)."""
        names = self.fetch_inline_policy_names(role_name)
        if not names:
            return []
        return self.fetch_inline_policy_bodies(role_name, names)

    def fetch_managed_policies(self, role_name: str) -> List[ManagedPolicyRef]:
        """List all managed policies attached to a role.

        Raises:
            PolicyListFailed: If any page of the listing fails
        """
        logger.info("Fetching managed policies", role_name=role_name)

        def fetch(marker: Optional[str]) -> Page[dict]:
            kwargs = {"RoleName": role_name}
            if marker:
                kwargs["Marker"] = marker
            return Page.from_marker_response(self.iam.list_attached_role_policies(**kwargs), "AttachedPolicies")

        try:
            attached = collect_pages(fetch, label="managed policies")
        except Exception as e:
            logger.error("Failed to fetch managed policies", role_name=role_name, error=str(e))
            raise PolicyListFailed(role_name, "managed policies", e) from e

        policies = [ManagedPolicyRef.from_response(item) for item in attached]
        logger.info("Loaded managed policies", role_name=role_name, count=len(policies))
        return policies
