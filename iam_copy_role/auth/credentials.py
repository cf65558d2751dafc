"""Credential resolution for the source and destination IAM clients.

The source client always uses the ambient (default chain) credentials. The
destination client uses either the same ambient credentials or temporary
credentials obtained by assuming a role in the destination account.
"""

import socket
import time
from typing import Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError

from ..errors import AssumeRoleFailed, ClientBuildFailed, MissingCredentials
from ..models import CredentialBundle

logger = structlog.get_logger(__name__)

SESSION_NAME_PREFIX = "iam-copy-role"


class CredentialResolver:
    """Resolves credentials and builds clients from them.

    Usage:
        resolver = CredentialResolver(boto3.Session(), region="us-east-1")
        resolver.resolve_ambient_credentials()

        source_iam = resolver.build_client("iam")
        bundle = resolver.get_credentials("arn:aws:iam::123456789012:role/CopyTarget")
        destination_iam = resolver.build_client("iam", bundle)

    Attributes:
        session: boto3 session holding the ambient credential chain
        region: AWS region for STS and IAM clients
        duration_seconds: Lifetime requested for assumed-role credentials
    """

    def __init__(
        self,
        session: Optional[boto3.Session] = None,
        region: Optional[str] = "us-east-1",
        duration_seconds: int = 3600,
    ):
        """Initialize the resolver.

        Args:
            session: Session providing ambient credentials (default: new boto3.Session)
            region: AWS region for STS and IAM clients (default: us-east-1)
            duration_seconds: Assumed-role credential lifetime (default: 3600)

        Raises:
            MissingCredentials: If the default session cannot load its profile
        """
        if session is None:
            try:
                session = boto3.Session(region_name=region)
            except BotoCoreError as e:
                logger.error("Failed to create AWS session", error=str(e), error_type=type(e).__name__)
                raise MissingCredentials(e) from e
        self.session = session
        self.region = region
        self.duration_seconds = duration_seconds

    def resolve_ambient_credentials(self) -> None:
        """Check that the ambient credential chain yields credentials.

        Only presence is checked, the credentials are not validated remotely.

        Raises:
            MissingCredentials: If no credentials are discoverable, or the
                credential chain fails (e.g. AWS_PROFILE names an unknown profile)
        """
        try:
            credentials = self.session.get_credentials()
        except BotoCoreError as e:
            logger.error("Failed to look up AWS credentials", error=str(e), error_type=type(e).__name__)
            raise MissingCredentials(e) from e

        if credentials is None:
            logger.error("No AWS credentials found")
            raise MissingCredentials()
        logger.debug("AWS credentials found")

    def _generate_session_name(self) -> str:
        """Generate a session name for role assumption.

        Session names include the hostname for CloudTrail auditing and a
        millisecond timestamp. They are not guaranteed to be unique.

        Returns:
            Session name in format: "iam-copy-role-{hostname}-{millis}"
        """
        try:
            hostname = socket.gethostname()
        except Exception:
            hostname = "unknown"

        # AWS session names are limited to 64 chars; prefix and timestamp take 28
        hostname = hostname[:34] or "unknown"

        timestamp = int(time.time() * 1000)
        return f"{SESSION_NAME_PREFIX}-{hostname}-{timestamp}"

    def assume_role(self, role_arn: str) -> CredentialBundle:
        """Assume an IAM role and return its temporary credentials.

        Args:
            role_arn: ARN of IAM role to assume

        Returns:
            CredentialBundle with access key, secret key and session token

        Raises:
            AssumeRoleFailed: If role assumption fails for any reason
        """
        session_name = self._generate_session_name()
        logger.info("Assuming IAM role", role_arn=role_arn, session_name=session_name)

        try:
            sts_client = self.session.client("sts", region_name=self.region)
            response = sts_client.assume_role(
                RoleArn=role_arn,
                RoleSessionName=session_name,
                DurationSeconds=self.duration_seconds,
            )
            bundle = CredentialBundle.from_sts(response["Credentials"])
        except Exception as e:
            logger.error(
                "Failed to assume role",
                role_arn=role_arn,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise AssumeRoleFailed(role_arn, e) from e

        logger.info("Role assumed successfully", role_arn=role_arn)
        return bundle

    def get_credentials(self, role_arn: Optional[str] = None) -> Optional[CredentialBundle]:
        """Return destination credentials.

        Args:
            role_arn: Role to assume, or None to keep the ambient credentials

        Returns:
            CredentialBundle for an assumed role, None for ambient credentials
        """
        if not role_arn:
            logger.info("Using default AWS credentials (no role ARN provided)")
            return None
        return self.assume_role(role_arn)

    def build_client(self, service_name: str, credentials: Optional[CredentialBundle] = None):
        """Build a boto3 client from ambient or explicit credentials.

        Args:
            service_name: boto3 service name, e.g. "iam"
            credentials: Bundle to use, or None for the ambient session

        Returns:
            boto3 client

        Raises:
            ClientBuildFailed: If botocore rejects the client configuration,
                e.g. an invalid region name
        """
        try:
            if credentials is None:
                logger.debug("Creating client with default credentials", service=service_name)
                return self.session.client(service_name, region_name=self.region)

            logger.debug(
                "Creating client with assumed role credentials",
                service=service_name,
                access_key_id=credentials.access_key_id,
            )
            session = boto3.Session(region_name=self.region, **credentials.as_session_kwargs())
            return session.client(service_name)
        except BotoCoreError as e:
            logger.error(
                "Failed to create client",
                service=service_name,
                region=self.region,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ClientBuildFailed(service_name, e) from e
