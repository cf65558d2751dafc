"""Top-level copy procedure.

Reads the complete source role (metadata, inline policies, managed policies)
before issuing any write, then creates the target role and attaches the
captured policies. Every remote call is attempted exactly once; the first
failure ends the run.

Usage:
    from iam_copy_role.copier import copy_role
    from iam_copy_role.models import Arguments

    result = copy_role(Arguments("app-role", "app-role-copy"))
    if not result.succeeded:
        print(result.error.format())
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import boto3
import structlog

from .auth import CredentialResolver
from .config import Config, get_config
from .errors import CopyRoleError, ErrorKind
from .models import Arguments
from .reader import RoleReader
from .writer import RoleWriter

logger = structlog.get_logger(__name__)


class CopyStep(str, Enum):
    """Steps of a copy run, in execution order."""

    CHECK_CREDENTIALS = "check_credentials"
    BUILD_SOURCE_CLIENT = "build_source_client"
    RESOLVE_DEST_CREDENTIALS = "resolve_dest_credentials"
    BUILD_DEST_CLIENT = "build_dest_client"
    READ_ROLE = "read_role"
    READ_INLINE_POLICIES = "read_inline_policies"
    READ_MANAGED_POLICIES = "read_managed_policies"
    CREATE_ROLE = "create_role"
    WRITE_INLINE_POLICIES = "write_inline_policies"
    WRITE_MANAGED_POLICIES = "write_managed_policies"


@dataclass
class CopyResult:
    """Outcome of a copy run: success, or the error that ended it."""

    arguments: Arguments
    error: Optional[CopyRoleError] = None
    failed_step: Optional[CopyStep] = None
    inline_policy_count: int = 0
    managed_policy_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


def copy_role(
    arguments: Arguments,
    session: Optional[boto3.Session] = None,
    config: Optional[Config] = None,
) -> CopyResult:
    """Copy a role, its inline policies and its managed policy attachments.

    Args:
        arguments: Parsed ``Arguments`` (source name, target name, optional ARN)
        session: Session with the ambient credentials (default: new boto3.Session)
        config: Runtime configuration (default: read from the environment)

    Returns:
        CopyResult; ``error`` holds the failure if the run did not complete.
        Errors of the copy pipeline are never raised to the caller.
    """
    config = config or get_config()
    result = CopyResult(arguments=arguments)
    log = logger.bind(source_role=arguments.source_role_name, target_role=arguments.target_role_name)
    step = CopyStep.CHECK_CREDENTIALS

    try:
        resolver = CredentialResolver(
            session=session,
            region=config.aws_region,
            duration_seconds=config.assume_role_duration_seconds,
        )
        resolver.resolve_ambient_credentials()

        step = CopyStep.BUILD_SOURCE_CLIENT
        reader = RoleReader(resolver.build_client("iam"))

        step = CopyStep.RESOLVE_DEST_CREDENTIALS
        destination_credentials = resolver.get_credentials(arguments.role_to_assume_arn)

        step = CopyStep.BUILD_DEST_CLIENT
        writer = RoleWriter(resolver.build_client("iam", destination_credentials))

        step = CopyStep.READ_ROLE
        spec = reader.fetch_role(arguments.source_role_name)

        step = CopyStep.READ_INLINE_POLICIES
        inline_policies = reader.fetch_inline_policies(arguments.source_role_name)

        step = CopyStep.READ_MANAGED_POLICIES
        managed_policies = reader.fetch_managed_policies(arguments.source_role_name)

        step = CopyStep.CREATE_ROLE
        writer.create_role(spec, arguments.target_role_name)

        if inline_policies:
            step = CopyStep.WRITE_INLINE_POLICIES
            result.inline_policy_count = writer.attach_inline_policies(arguments.target_role_name, inline_policies)

        if managed_policies:
            step = CopyStep.WRITE_MANAGED_POLICIES
            result.managed_policy_count = writer.attach_managed_policies(
                arguments.target_role_name, managed_policies
            )

    except CopyRoleError as e:
        log.error("Copy failed", step=step.value, kind=e.kind.value, error=e.message)
        result.error = e
        result.failed_step = step
        return result

    log.info(
        "Copy complete",
        inline_policies=result.inline_policy_count,
        managed_policies=result.managed_policy_count,
    )
    return result
