"""Central exception hierarchy"""
from __future__ import annotations

from typing import Optional


class PemSignError(Exception):
    """Base exception for all failures"""

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class PreconditionError(PemSignError):
    """Raised when the request is missing a key, payload, algorithm or signature"""


class UnsupportedAlgorithmError(PreconditionError):
    """Raised when the algorithm id is not in the provider table"""


class MissingSignatureError(PreconditionError):
    """Raised when verification is requested without a signature source"""


class KeyRoleError(PreconditionError):
    """Raised when the key cannot serve the requested action or algorithm"""


class KeyUnreadableError(PemSignError):
    """Raised when key material cannot be located, fetched or parsed"""


class SourceReadError(PemSignError):
    """Raised when a payload or signature source cannot be read"""


class UnhandledActionError(PemSignError):
    """Raised when no action was given and the key role does not imply one"""


__all__ = [
    "KeyRoleError",
    "KeyUnreadableError",
    "MissingSignatureError",
    "PemSignError",
    "PreconditionError",
    "SourceReadError",
    "UnhandledActionError",
    "UnsupportedAlgorithmError",
]
