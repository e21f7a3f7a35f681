from .batch import run_batch, validate_batch
from .operation import SignOperation, sign, sign_or_verify, validate_request, verify

__all__ = [
    "SignOperation",
    "run_batch",
    "sign",
    "sign_or_verify",
    "validate_batch",
    "validate_request",
    "verify",
]
