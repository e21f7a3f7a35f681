# Request/result value objects shared by the pipeline stages.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import UnhandledActionError

Payload = Union[str, bytes]
Result = Union[str, bool]


class Action(str, Enum):
    SIGN = "SIGN"
    VERIFY = "VERIFY"
    UNSPECIFIED = "UNSPECIFIED"


class KeyRole(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
    CERTIFICATE = "certificate"


class KeySourceKind(str, Enum):
    HANDLE = "handle"
    INLINE_PEM = "inline_pem"
    FILE = "file"
    HTTPS_URL = "https_url"


class Stage(str, Enum):
    VALIDATING = "validating"
    RESOLVING_KEY = "resolving_key"
    READING_PAYLOAD = "reading_payload"
    READING_SIGNATURE = "reading_signature"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class OperationRequest:
    """Everything one sign/verify invocation needs.

    ``key`` takes precedence over ``pem``, ``data`` over ``input`` and
    ``sig_string`` over ``signature``.
    """
    algorithm: Optional[str] = None
    action: Action = Action.UNSPECIFIED
    pem: Optional[Union[str, Path]] = None
    key: Any = None
    input: Optional[Union[str, Path]] = None
    data: Optional[Payload] = None
    signature: Optional[Union[str, Path]] = None
    sig_string: Optional[Payload] = None
    debug: bool = False
    encoding: str = "utf-8"
    timeout: float = 10.0
    verify_tls: bool = True

    def __post_init__(self) -> None:
        if self.action is None:
            self.action = Action.UNSPECIFIED
        elif not isinstance(self.action, Action):
            try:
                self.action = Action(str(self.action).upper())
            except ValueError:
                raise UnhandledActionError(f"Unhandled action: {self.action}") from None


@dataclass(frozen=True, slots=True)
class KeySource:
    """Tagged key specifier: what kind of source and the raw value."""
    kind: KeySourceKind
    value: Any


@dataclass(frozen=True, slots=True)
class ResolvedKey:
    key: Any
    role: KeyRole
    certificate: Any = None

    def public_key(self) -> Any:
        if self.role is KeyRole.PRIVATE:
            return self.key.public_key()
        return self.key


@dataclass(slots=True)
class BatchEntry:
    file: str
    result: Optional[Result] = None
    error: Optional[str] = None

    def as_dict(self) -> dict:
        if self.error is not None:
            return {"file": self.file, "error": self.error}
        return {"file": self.file, "result": self.result}


@dataclass(slots=True)
class BatchOutcome:
    entries: List[BatchEntry] = field(default_factory=list)
    exit_code: int = 0


__all__ = [
    "Action",
    "BatchEntry",
    "BatchOutcome",
    "KeyRole",
    "KeySource",
    "KeySourceKind",
    "OperationRequest",
    "Payload",
    "ResolvedKey",
    "Result",
    "Stage",
]
