# Turn PEM text or a caller-supplied key object into a ResolvedKey.
from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Callable, Dict

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa

from ..exceptions import KeyUnreadableError
from ..models import KeyRole, ResolvedKey

PEM_MARKER = "-----BEGIN"

_PEM_BLOCK = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----(?P<body>.*?)-----END (?P=label)-----",
    re.DOTALL,
)

_PRIVATE_TYPES = (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey, dsa.DSAPrivateKey)
_PUBLIC_TYPES = (rsa.RSAPublicKey, ec.EllipticCurvePublicKey, dsa.DSAPublicKey)


def _private(der: bytes) -> ResolvedKey:
    return ResolvedKey(key=serialization.load_der_private_key(der, password=None), role=KeyRole.PRIVATE)


def _public(der: bytes) -> ResolvedKey:
    return ResolvedKey(key=serialization.load_der_public_key(der), role=KeyRole.PUBLIC)


def _certificate(der: bytes) -> ResolvedKey:
    cert = x509.load_der_x509_certificate(der)
    return ResolvedKey(key=cert.public_key(), role=KeyRole.CERTIFICATE, certificate=cert)


_LOADERS: Dict[str, Callable[[bytes], ResolvedKey]] = {
    "PRIVATE KEY": _private,
    "RSA PRIVATE KEY": _private,
    "EC PRIVATE KEY": _private,
    "DSA PRIVATE KEY": _private,
    "PUBLIC KEY": _public,
    "RSA PUBLIC KEY": _public,
    "CERTIFICATE": _certificate,
}


def der_to_pem_certificate(der: bytes) -> str:
    """Frame a DER certificate as a single-line PEM block."""
    return "".join([
        "-----BEGIN CERTIFICATE-----",
        base64.b64encode(der).decode("ascii"),
        "-----END CERTIFICATE-----",
    ])


def key_from_pem(pem: str) -> ResolvedKey:
    """Parse the first PEM block of ``pem`` with a key or certificate label.

    The body is decoded by hand so that blocks without line breaks (as built
    by :func:`der_to_pem_certificate`) load the same as wrapped ones.
    """
    match = next((m for m in _PEM_BLOCK.finditer(pem) if m.group("label") in _LOADERS), None)
    if not match:
        labels = [m.group("label") for m in _PEM_BLOCK.finditer(pem)]
        if labels:
            raise KeyUnreadableError(f"Unsupported PEM type: {', '.join(labels)}")
        raise KeyUnreadableError("No PEM block found in key material")
    label = match.group("label")
    loader = _LOADERS[label]
    body = "".join(match.group("body").split())
    try:
        der = base64.b64decode(body, validate=True)
        resolved = loader(der)
    except (binascii.Error, ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyUnreadableError(f"Cannot parse {label}: {exc}") from exc
    if not isinstance(resolved.key, _PRIVATE_TYPES + _PUBLIC_TYPES):
        raise KeyUnreadableError(f"Unsupported key type in {label}: {type(resolved.key).__name__}")
    return resolved


def key_from_handle(handle: Any) -> ResolvedKey:
    """Wrap a caller-built key object; its role comes from its type."""
    if isinstance(handle, ResolvedKey):
        return handle
    if isinstance(handle, x509.Certificate):
        return ResolvedKey(key=handle.public_key(), role=KeyRole.CERTIFICATE, certificate=handle)
    if isinstance(handle, _PRIVATE_TYPES):
        return ResolvedKey(key=handle, role=KeyRole.PRIVATE)
    if isinstance(handle, _PUBLIC_TYPES):
        return ResolvedKey(key=handle, role=KeyRole.PUBLIC)
    raise KeyUnreadableError(f"Unsupported key handle: {type(handle).__name__}")


def is_key_handle(value: Any) -> bool:
    return isinstance(value, (ResolvedKey, x509.Certificate) + _PRIVATE_TYPES + _PUBLIC_TYPES)


__all__ = [
    "PEM_MARKER",
    "der_to_pem_certificate",
    "is_key_handle",
    "key_from_handle",
    "key_from_pem",
]
