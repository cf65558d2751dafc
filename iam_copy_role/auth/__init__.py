"""AWS credential resolution.

This module provides the ambient credential check and role assumption used to
build the source and destination IAM clients.
"""

from .credentials import CredentialResolver

__all__ = ["CredentialResolver"]
