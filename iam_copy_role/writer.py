"""Create the target role and attach the captured policies at the destination."""

from typing import List

import structlog

from .errors import PolicyAttachFailed, RoleCreateFailed
from .models import InlinePolicy, ManagedPolicyRef, RoleSpec

logger = structlog.get_logger(__name__)


class RoleWriter:
    """Writes a captured role through a destination IAM client.

    Calls are issued one at a time. A failed attachment stops the remaining
    attachments and leaves the already created role in place; nothing is
    rolled back.
    """

    def __init__(self, iam_client):
        """Initialize with the destination IAM client.

        Args:
            iam_client: boto3 IAM client for the destination account
        """
        self.iam = iam_client

    def create_role(self, spec: RoleSpec, target_name: str) -> dict:
        """Create ``target_name`` from the captured source role.

        Returns:
            The ``Role`` member of the create-role response

        Raises:
            RoleCreateFailed: If creation fails (most commonly a name collision)
        """
        logger.info("Creating target role", target_role=target_name, source_role=spec.name)
        try:
            response = self.iam.create_role(**spec.to_create_kwargs(target_name))
        except Exception as e:
            logger.error("Failed to create target role", target_role=target_name, error=str(e))
            raise RoleCreateFailed(target_name, e) from e

        logger.info("Created target role", target_role=target_name)
        return response.get("Role", {})

    def attach_inline_policies(self, target_name: str, policies: List[InlinePolicy]) -> int:
        """Put each inline policy on the target role under its original name.

        Returns:
            Number of policies attached

        Raises:
            PolicyAttachFailed: On the first policy that cannot be put
        """
        if not policies:
            logger.debug("No inline policies to add", target_role=target_name)
            return 0

        logger.info("Adding inline policies", target_role=target_name, count=len(policies))
        for policy in policies:
            try:
                self.iam.put_role_policy(
                    RoleName=target_name,
                    PolicyName=policy.name,
                    PolicyDocument=policy.document,
                )
            except Exception as e:
                logger.error(
                    "Failed to add inline policy",
                    target_role=target_name,
                    policy_name=policy.name,
                    error=str(e),
                )
                raise PolicyAttachFailed(policy.name, e) from e

        logger.info("Added inline policies", target_role=target_name, count=len(policies))
        return len(policies)

    def attach_managed_policies(self, target_name: str, policies: List[ManagedPolicyRef]) -> int:
        """Attach each managed policy to the target role by ARN.

        Returns:
            Number of policies attached

        Raises:
            PolicyAttachFailed: On the first policy that cannot be attached
        """
        if not policies:
            logger.debug("No managed policies to add", target_role=target_name)
            return 0

        logger.info("Adding managed policies", target_role=target_name, count=len(policies))
        for policy in policies:
            try:
                self.iam.attach_role_policy(RoleName=target_name, PolicyArn=policy.arn)
            except Exception as e:
                logger.error(
                    "Failed to add managed policy",
                    target_role=target_name,
                    policy_arn=policy.arn,
                    error=str(e),
                )
                raise PolicyAttachFailed(policy.arn, e) from e

        logger.info("Added managed policies", target_role=target_name, count=len(policies))
        return len(policies)
