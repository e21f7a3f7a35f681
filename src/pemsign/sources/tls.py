"""Fetch the leaf certificate a TLS server presents."""
from __future__ import annotations

import asyncio
import ssl
from urllib.parse import urlsplit

import structlog

from ..exceptions import KeyUnreadableError

log = structlog.get_logger(__name__)

DEFAULT_HTTPS_PORT = 443


def _ssl_context(verify: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


async def fetch_peer_certificate(url: str, *, timeout: float, verify: bool = True) -> bytes:
    """Return the DER bytes of the leaf certificate served at ``url``."""
    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port or DEFAULT_HTTPS_PORT
    except ValueError as exc:
        raise KeyUnreadableError(f"Cannot read PEM: {url}") from exc
    if not host:
        raise KeyUnreadableError(f"Cannot read PEM: {url}")

    log.debug("fetching peer certificate", host=host, port=port, verify=verify)
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port, ssl=_ssl_context(verify), server_hostname=host),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise KeyUnreadableError(f"Timed out after {timeout}s connecting to {host}:{port}") from exc
    except (OSError, ssl.SSLError, UnicodeError) as exc:
        # UnicodeError: host name rejected by the IDNA codec
        raise KeyUnreadableError(f"Cannot fetch certificate from {url}: {exc}") from exc

    try:
        ssl_object = writer.get_extra_info("ssl_object")
        der = ssl_object.getpeercert(binary_form=True) if ssl_object else None
    finally:
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=timeout)
        except (OSError, ssl.SSLError, asyncio.TimeoutError):  # pragma: no cover - teardown race
            pass

    if not der:
        raise KeyUnreadableError(f"{host}:{port} did not present a certificate")
    return der


__all__ = ["DEFAULT_HTTPS_PORT", "fetch_peer_certificate"]
