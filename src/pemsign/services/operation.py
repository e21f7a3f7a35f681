# Sequence validation, key resolution, reads and dispatch for one request.
from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

import structlog

from ..crypto.algorithms import get_scheme
from ..crypto.signature import execute
from ..exceptions import MissingSignatureError, PemSignError, PreconditionError
from ..models import Action, OperationRequest, Payload, Result, Stage
from ..sources.keysource import resolve_key
from ..sources.payload import get_payload, get_signature

log = structlog.get_logger(__name__)


def validate_request(request: OperationRequest) -> None:
    """Entry guard. Performs no I/O."""
    if request.key is None and not request.pem:
        raise PreconditionError("no key or PEM specified")
    if request.data is None and not request.input:
        raise PreconditionError("input file not specified")
    get_scheme(request.algorithm)
    if request.action is Action.VERIFY and request.sig_string is None and not request.signature:
        raise MissingSignatureError("Signature file not specified")


class SignOperation:
    """Runs one request through the stage machine.

    ``stage`` ends at ``DONE`` or ``FAILED``; a raised ``PemSignError``
    carries the stage it failed in.
    """

    def __init__(self, request: OperationRequest) -> None:
        self.request = request
        self.stage = Stage.VALIDATING
        self._log = log.bind(algorithm=request.algorithm, action=request.action.value)

    def _enter(self, stage: Stage) -> None:
        self.stage = stage
        self._log.debug("stage", stage=stage.value)

    async def run(self) -> Result:
        try:
            return await self._run()
        except PemSignError as exc:
            if exc.stage is None:
                exc.stage = self.stage.value
            self._log.info("operation failed", stage=self.stage.value, error=str(exc), exc_info=self.request.debug)
            self.stage = Stage.FAILED
            raise
        except Exception:
            self.stage = Stage.FAILED
            raise

    async def _run(self) -> Result:
        request = self.request
        self._enter(Stage.VALIDATING)
        validate_request(request)

        self._enter(Stage.RESOLVING_KEY)
        key = await resolve_key(request)

        self._enter(Stage.READING_PAYLOAD)
        payload = await get_payload(request)

        signature: Optional[Payload] = None
        needs_signature = request.action is Action.VERIFY or (
            request.action is Action.UNSPECIFIED
            and (request.sig_string is not None or request.signature is not None)
        )
        if needs_signature:
            self._enter(Stage.READING_SIGNATURE)
            signature = await get_signature(request)

        self._enter(Stage.DISPATCHING)
        result = execute(request.action, request.algorithm, key, payload, signature)  # type: ignore[arg-type]

        self._enter(Stage.DONE)
        self._log.info("operation done", role=key.role.value)
        return result


def _coerce(request: Optional[OperationRequest], options: dict[str, Any]) -> OperationRequest:
    if request is None:
        return OperationRequest(**options)
    if options:
        return replace(request, **options)
    return request


async def sign_or_verify(request: Optional[OperationRequest] = None, **options: Any) -> Result:
    """Sign or verify according to ``request.action`` (or the key's role).

    Returns the hex signature for SIGN and a bool for VERIFY.
    """
    return await SignOperation(_coerce(request, options)).run()


async def sign(request: Optional[OperationRequest] = None, **options: Any) -> Result:
    options["action"] = Action.SIGN
    return await sign_or_verify(request, **options)


async def verify(request: Optional[OperationRequest] = None, **options: Any) -> Result:
    options["action"] = Action.VERIFY
    return await sign_or_verify(request, **options)


__all__ = ["SignOperation", "sign", "sign_or_verify", "validate_request", "verify"]
