"""Error taxonomy for role copying.

Every step of the copy pipeline catches failures where they happen and
re-raises them as one of the ``CopyRoleError`` subclasses below, keeping the
original exception as ``__cause__``. The orchestrator catches the final error
exactly once.

Usage:
    from iam_copy_role.errors import RoleFetchFailed

    try:
        iam.get_role(RoleName=role_name)
    except Exception as e:
        raise RoleFetchFailed(role_name, e) from e
"""

from enum import Enum
from typing import Optional

from botocore.exceptions import ClientError


class ErrorKind(str, Enum):
    """Kinds of failure a copy run can end with."""

    USAGE = "usage"
    MISSING_CREDENTIALS = "missing_credentials"
    ASSUME_ROLE_FAILED = "assume_role_failed"
    CLIENT_BUILD_FAILED = "client_build_failed"
    ROLE_FETCH_FAILED = "role_fetch_failed"
    POLICY_LIST_FAILED = "policy_list_failed"
    POLICY_FETCH_FAILED = "policy_fetch_failed"
    ROLE_CREATE_FAILED = "role_create_failed"
    POLICY_ATTACH_FAILED = "policy_attach_failed"


# Hints for well-known IAM/STS error codes. The error kind is not changed by
# these, they only add a suggestion line to the message.
ERROR_CODE_SUGGESTIONS = {
    "NoSuchEntity": "Check that the role exists and the name is spelled correctly",
    "EntityAlreadyExists": "A role with this name already exists at the destination; choose another target name",
    "AccessDenied": "Check that the credentials in use are allowed to perform this IAM/STS action",
    "AccessDeniedException": "Check that the credentials in use are allowed to perform this IAM/STS action",
    "MalformedPolicyDocument": "The source policy document was rejected by the destination; inspect it manually",
    "LimitExceeded": "An IAM quota was reached at the destination",
}


def error_code(exc: BaseException) -> Optional[str]:
    """Return the remote error code of a botocore ``ClientError``, if any."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


def describe_cause(exc: BaseException) -> str:
    """Return a human-readable message for an underlying failure.

    Args:
        exc: Exception raised by boto3/botocore or by local code

    Returns:
        The service's error message for ``ClientError``, otherwise ``str(exc)``
    """
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message")
        if message:
            return message
    text = str(exc)
    return text if text else type(exc).__name__


class CopyRoleError(Exception):
    """Base class for all failures of a copy run."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        details: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        # Include all parts in the base exception message for better error reporting
        full_message = message
        if suggestion:
            full_message += f"\n\n{suggestion}"
        if details:
            full_message += f"\n\n{details}"
        super().__init__(full_message)
        self.message = message
        self.suggestion = suggestion
        self.details = details
        self.cause = cause

    def format(self) -> str:
        """Format error for console output with suggestions."""
        output = f"❌ {self.message}"
        if self.suggestion:
            output += f"\n   💡 {self.suggestion}"
        if self.details:
            output += f"\n   ℹ️  {self.details}"
        return output


class RemoteCallError(CopyRoleError):
    """A copy step failed because of an underlying (usually remote) error."""

    def __init__(self, message: str, cause: BaseException):
        code = error_code(cause)
        super().__init__(
            f'{message}: "{describe_cause(cause)}"',
            suggestion=ERROR_CODE_SUGGESTIONS.get(code) if code else None,
            details=f"Error code: {code}" if code else None,
            cause=cause,
        )
        self.error_code = code


class UsageError(CopyRoleError):
    kind = ErrorKind.USAGE

    def __init__(self, message: str):
        super().__init__(
            message,
            suggestion="Usage: iam-copy-role SOURCE_ROLE_NAME TARGET_ROLE_NAME [ROLE_TO_ASSUME_ARN]",
        )


class MissingCredentials(CopyRoleError):
    kind = ErrorKind.MISSING_CREDENTIALS

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(
            "Failed to find AWS credentials",
            suggestion="Consider providing them with environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)",
            details=f"Credential lookup failed: {describe_cause(cause)}" if cause else None,
            cause=cause,
        )


class AssumeRoleFailed(RemoteCallError):
    kind = ErrorKind.ASSUME_ROLE_FAILED

    def __init__(self, arn: str, cause: BaseException):
        super().__init__(f"Failed to assume role {arn}", cause)
        self.arn = arn


class ClientBuildFailed(RemoteCallError):
    kind = ErrorKind.CLIENT_BUILD_FAILED

    def __init__(self, service_name: str, cause: BaseException):
        super().__init__(f"Failed to create {service_name} client", cause)
        self.service_name = service_name


class RoleFetchFailed(RemoteCallError):
    kind = ErrorKind.ROLE_FETCH_FAILED

    def __init__(self, role_name: str, cause: BaseException):
        super().__init__(f"Failed to fetch source role {role_name}", cause)
        self.role_name = role_name


class PolicyListFailed(RemoteCallError):
    kind = ErrorKind.POLICY_LIST_FAILED

    def __init__(self, role_name: str, listing: str, cause: BaseException):
        super().__init__(f"Failed to fetch {listing} for {role_name}", cause)
        self.role_name = role_name
        self.listing = listing


class PolicyFetchFailed(RemoteCallError):
    kind = ErrorKind.POLICY_FETCH_FAILED

    def __init__(self, policy_name: str, cause: BaseException):
        super().__init__(f"Failed to fetch inline policy {policy_name}", cause)
        self.policy_name = policy_name


class RoleCreateFailed(RemoteCallError):
    kind = ErrorKind.ROLE_CREATE_FAILED

    def __init__(self, target_name: str, cause: BaseException):
        super().__init__(f"Failed to create target role {target_name}", cause)
        self.target_name = target_name


class PolicyAttachFailed(RemoteCallError):
    kind = ErrorKind.POLICY_ATTACH_FAILED

    def __init__(self, policy_identifier: str, cause: BaseException):
        super().__init__(f"Failed to add policy {policy_identifier}", cause)
        self.policy_identifier = policy_identifier
