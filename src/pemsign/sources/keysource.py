"""Locate key material and turn it into a ResolvedKey.

A key specifier is classified by the ordered predicates in ``_CLASSIFIERS``;
the first one that matches decides the source kind. Content sniffing comes
before the filesystem check, so text starting with the PEM marker is always
inline PEM even when a file with that exact name exists.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Union

import structlog

from ..crypto.keys import PEM_MARKER, der_to_pem_certificate, is_key_handle, key_from_handle, key_from_pem
from ..exceptions import KeyUnreadableError, SourceReadError
from ..models import KeySource, KeySourceKind, OperationRequest, ResolvedKey
from .payload import read_source
from .tls import fetch_peer_certificate

log = structlog.get_logger(__name__)

_HTTPS_URL = re.compile(r"^https://", re.IGNORECASE)

Specifier = Union[str, Path]


def is_inline_pem(spec: Specifier) -> bool:
    return isinstance(spec, str) and spec.startswith(PEM_MARKER)


def is_existing_file(spec: Specifier) -> bool:
    try:
        return Path(spec).is_file()
    except (OSError, ValueError):
        return False


def is_https_url(spec: Specifier) -> bool:
    return isinstance(spec, str) and bool(_HTTPS_URL.match(spec))


_CLASSIFIERS: Tuple[Tuple[KeySourceKind, Callable[[Specifier], bool]], ...] = (
    (KeySourceKind.INLINE_PEM, is_inline_pem),
    (KeySourceKind.FILE, is_existing_file),
    (KeySourceKind.HTTPS_URL, is_https_url),
)


def classify_key_specifier(pem: Optional[Specifier] = None, key: Any = None) -> KeySource:
    """Tag the caller's key input. A key handle always wins over ``pem``."""
    if key is not None:
        if not is_key_handle(key):
            raise KeyUnreadableError(f"Unsupported key handle: {type(key).__name__}")
        if pem:
            log.debug("key handle supplied, ignoring pem specifier")
        return KeySource(kind=KeySourceKind.HANDLE, value=key)
    if pem:
        for kind, predicate in _CLASSIFIERS:
            if predicate(pem):
                return KeySource(kind=kind, value=pem)
    raise KeyUnreadableError(f"Cannot read PEM: {pem}")


async def load_pem(source: KeySource, *, timeout: float = 10.0, verify_tls: bool = True) -> str:
    """Produce PEM text for a non-handle source."""
    if source.kind is KeySourceKind.INLINE_PEM:
        return source.value
    if source.kind is KeySourceKind.FILE:
        try:
            return await read_source(source.value, what="key")
        except SourceReadError as exc:
            raise KeyUnreadableError(f"Cannot read PEM: {source.value} ({exc})") from exc
    if source.kind is KeySourceKind.HTTPS_URL:
        der = await fetch_peer_certificate(source.value, timeout=timeout, verify=verify_tls)
        return der_to_pem_certificate(der)
    raise KeyUnreadableError(f"Cannot read PEM: {source.value!r}")


async def resolve_key(request: OperationRequest) -> ResolvedKey:
    source = classify_key_specifier(request.pem, request.key)
    log.debug("key source classified", kind=source.kind.value)
    if source.kind is KeySourceKind.HANDLE:
        return key_from_handle(source.value)
    pem = await load_pem(source, timeout=request.timeout, verify_tls=request.verify_tls)
    return key_from_pem(pem)


__all__ = [
    "classify_key_specifier",
    "is_existing_file",
    "is_https_url",
    "is_inline_pem",
    "load_pem",
    "resolve_key",
]
