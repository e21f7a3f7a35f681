"""Sign and verify data with PEM keys, key files or a website's TLS certificate."""

from .crypto.algorithms import list_algorithms
from .exceptions import (
    KeyRoleError,
    KeyUnreadableError,
    MissingSignatureError,
    PemSignError,
    PreconditionError,
    SourceReadError,
    UnhandledActionError,
    UnsupportedAlgorithmError,
)
from .models import Action, KeyRole, OperationRequest, ResolvedKey
from .services.batch import run_batch
from .services.operation import sign, sign_or_verify, verify
from .version import __version__

__all__ = [
    "Action",
    "KeyRole",
    "KeyRoleError",
    "KeyUnreadableError",
    "MissingSignatureError",
    "OperationRequest",
    "PemSignError",
    "PreconditionError",
    "ResolvedKey",
    "SourceReadError",
    "UnhandledActionError",
    "UnsupportedAlgorithmError",
    "__version__",
    "list_algorithms",
    "run_batch",
    "sign",
    "sign_or_verify",
    "verify",
]
