from .algorithms import ALGORITHMS, SignatureScheme, get_scheme, is_supported, list_algorithms
from .keys import der_to_pem_certificate, key_from_handle, key_from_pem
from .signature import ROLE_ACTIONS, Signature, execute, infer_action

__all__ = [
    "ALGORITHMS",
    "ROLE_ACTIONS",
    "Signature",
    "SignatureScheme",
    "der_to_pem_certificate",
    "execute",
    "get_scheme",
    "infer_action",
    "is_supported",
    "key_from_handle",
    "key_from_pem",
    "list_algorithms",
]
