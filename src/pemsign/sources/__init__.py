from .keysource import classify_key_specifier, is_existing_file, is_https_url, is_inline_pem, load_pem, resolve_key
from .payload import get_payload, get_signature, read_source
from .tls import fetch_peer_certificate

__all__ = [
    "classify_key_specifier",
    "fetch_peer_certificate",
    "get_payload",
    "get_signature",
    "is_existing_file",
    "is_https_url",
    "is_inline_pem",
    "load_pem",
    "read_source",
    "resolve_key",
]
