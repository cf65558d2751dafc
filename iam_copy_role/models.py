import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote

from .errors import UsageError


def decode_policy_document(document: Any) -> str:
    """Return a policy document as JSON text.

    The IAM API returns documents URL-encoded. boto3 normally decodes them into
    JSON objects already, in which case they are serialized back to text.

    Examples:
        >>> decode_policy_document('%7B%22a%22%3A1%7D')
        '{"a":1}'
        >>> decode_policy_document({"a": 1})
        '{"a": 1}'
    """
    if isinstance(document, str):
        return unquote(document)
    return json.dumps(document)


@dataclass(frozen=True)
class RoleSpec:
    """Snapshot of a source role, used as the template for the new role."""

    path: str
    name: str
    trust_policy_document: str
    description: Optional[str] = None
    max_session_duration: Optional[int] = None
    permissions_boundary_arn: Optional[str] = None
    tags: Tuple[Dict[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def from_response(cls, role: Dict[str, Any]) -> "RoleSpec":
        """Build a spec from the ``Role`` member of a get-role response."""
        boundary = role.get("PermissionsBoundary") or {}
        return cls(
            path=role.get("Path", "/"),
            name=role["RoleName"],
            trust_policy_document=decode_policy_document(role["AssumeRolePolicyDocument"]),
            description=role.get("Description"),
            max_session_duration=role.get("MaxSessionDuration"),
            permissions_boundary_arn=boundary.get("PermissionsBoundaryArn"),
            tags=tuple({"Key": tag["Key"], "Value": tag["Value"]} for tag in role.get("Tags", [])),
        )

    def to_create_kwargs(self, target_name: str) -> Dict[str, Any]:
        """Keyword arguments for ``iam.create_role`` creating ``target_name``.

        boto3 rejects ``None`` values, so optional members the source role
        does not have are left out.
        """
        kwargs: Dict[str, Any] = {
            "Path": self.path,
            "RoleName": target_name,
            "AssumeRolePolicyDocument": self.trust_policy_document,
        }
        if self.description is not None:
            kwargs["Description"] = self.description
        if self.max_session_duration is not None:
            kwargs["MaxSessionDuration"] = self.max_session_duration
        if self.permissions_boundary_arn:
            kwargs["PermissionsBoundary"] = self.permissions_boundary_arn
        if self.tags:
            kwargs["Tags"] = [dict(tag) for tag in self.tags]
        return kwargs


@dataclass(frozen=True)
class InlinePolicy:
    name: str
    document: str

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "InlinePolicy":
        """Build from a get-role-policy response."""
        return cls(name=response["PolicyName"], document=decode_policy_document(response["PolicyDocument"]))


@dataclass(frozen=True)
class ManagedPolicyRef:
    arn: str
    name: str

    @classmethod
    def from_response(cls, attached: Dict[str, Any]) -> "ManagedPolicyRef":
        """Build from one entry of a list-attached-role-policies response."""
        return cls(arn=attached["PolicyArn"], name=attached.get("PolicyName", ""))


@dataclass(frozen=True)
class CredentialBundle:
    """Temporary credentials for the destination client.

    ``None`` is used in place of a bundle to mean "use the ambient credentials".
    """

    access_key_id: str
    secret_access_key: str
    session_token: str

    @classmethod
    def from_sts(cls, credentials: Dict[str, Any]) -> "CredentialBundle":
        """Build from the ``Credentials`` member of an STS assume-role response."""
        return cls(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials["SessionToken"],
        )

    def as_session_kwargs(self) -> Dict[str, str]:
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
            "aws_session_token": self.session_token,
        }

    def __repr__(self) -> str:
        return f"CredentialBundle(access_key_id={self.access_key_id!r}, secret_access_key='***', session_token='***')"


@dataclass(frozen=True)
class Arguments:
    """Parsed command line arguments."""

    source_role_name: str
    target_role_name: str
    role_to_assume_arn: Optional[str] = None

    def __post_init__(self):
        if not self.source_role_name or not self.source_role_name.strip():
            raise UsageError("SOURCE_ROLE_NAME must not be empty")
        if not self.target_role_name or not self.target_role_name.strip():
            raise UsageError("TARGET_ROLE_NAME must not be empty")

    @classmethod
    def from_argv(cls, argv: List[str]) -> "Arguments":
        """Parse ``SOURCE_ROLE_NAME TARGET_ROLE_NAME [ROLE_TO_ASSUME_ARN]``.

        Values after the third are ignored.

        Raises:
            UsageError: If fewer than two values are given
        """
        if len(argv) < 2:
            raise UsageError("Expected at least SOURCE_ROLE_NAME and TARGET_ROLE_NAME")
        return cls(
            source_role_name=argv[0],
            target_role_name=argv[1],
            role_to_assume_arn=argv[2] if len(argv) > 2 and argv[2] else None,
        )
