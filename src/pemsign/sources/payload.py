"""Payload and signature readers.

Explicit values (``data``, ``sig_string``) are returned verbatim and win over
their source paths. Sources are read whole; there is no streaming.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Union

from ..exceptions import MissingSignatureError, SourceReadError
from ..models import OperationRequest, Payload


def _read_text(path: Path, encoding: str) -> str:
    return path.read_bytes().decode(encoding)


async def read_source(source: Union[str, Path], encoding: str = "utf-8", *, what: str = "input") -> str:
    try:
        return await asyncio.to_thread(_read_text, Path(source), encoding)
    except FileNotFoundError as exc:
        raise SourceReadError(f"{what} file not found: {source}") from exc
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise SourceReadError(f"Cannot read {what} file {source}: {exc}") from exc


async def get_payload(request: OperationRequest) -> Payload:
    if request.data is not None:
        return request.data
    if request.input is None:
        raise SourceReadError("input file not specified")
    return await read_source(request.input, request.encoding, what="input")


async def get_signature(request: OperationRequest) -> Payload:
    if request.sig_string is not None:
        return request.sig_string
    if request.signature is None:
        raise MissingSignatureError("Signature file not specified")
    return await read_source(request.signature, request.encoding, what="signature")


__all__ = ["get_payload", "get_signature", "read_source"]
