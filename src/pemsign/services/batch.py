# Run one operation per input file, in order, without stopping on failures.
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from ..exceptions import PemSignError, PreconditionError
from ..models import Action, BatchEntry, BatchOutcome, OperationRequest
from .operation import SignOperation, validate_request

log = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def validate_batch(
    template: OperationRequest,
    inputs: Sequence[PathLike],
    signatures: Optional[Sequence[PathLike]] = None,
) -> None:
    """Checks shared by every entry; raised before any input is touched."""
    if not inputs:
        raise PreconditionError("No input file specified")
    signatures = signatures or []
    if template.action is Action.VERIFY and len(signatures) != len(inputs):
        raise PreconditionError(
            f"Expected {len(inputs)} signature file(s), got {len(signatures)}"
        )
    probe = replace(
        template,
        input=inputs[0],
        signature=signatures[0] if signatures else template.signature,
    )
    validate_request(probe)


async def run_batch(
    template: OperationRequest,
    inputs: Sequence[PathLike],
    signatures: Optional[Sequence[PathLike]] = None,
) -> BatchOutcome:
    """Sign or verify each input with the settings in ``template``.

    ``signatures`` pair positionally with ``inputs``. Errors raised by
    :func:`validate_batch` are fatal; per-input errors are recorded on the
    entry unless ``template.debug`` is set, in which case they propagate.
    The exit code is 1 when any entry failed or any verification was false.
    """
    validate_batch(template, inputs, signatures)
    signatures = signatures or []
    outcome = BatchOutcome()

    for index, input_path in enumerate(inputs):
        request = replace(
            template,
            input=input_path,
            signature=signatures[index] if index < len(signatures) else template.signature,
        )
        entry = BatchEntry(file=str(input_path))
        try:
            entry.result = await SignOperation(request).run()
        except PemSignError as exc:
            if template.debug:
                raise
            entry.error = str(exc)
            outcome.exit_code = 1
        else:
            if entry.result is False:
                outcome.exit_code = 1
        log.debug("batch entry", file=entry.file, ok=entry.error is None)
        outcome.entries.append(entry)

    return outcome


__all__ = ["run_batch", "validate_batch"]
