"""Copy an IAM role, its inline policies and its managed policy attachments."""

from .copier import CopyResult, CopyStep, copy_role
from .errors import CopyRoleError, ErrorKind
from .models import Arguments
from .version import __version__

__all__ = ["Arguments", "CopyResult", "CopyRoleError", "CopyStep", "ErrorKind", "__version__", "copy_role"]
