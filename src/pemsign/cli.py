"""Typer-based command line interface for pemsign."""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from .config import AppConfig, load_config
from .crypto.algorithms import list_algorithms
from .exceptions import PemSignError
from .logging import configure_logging
from .models import Action, BatchOutcome, OperationRequest, Result
from .services.batch import run_batch
from .version import __version__

app = typer.Typer(help="Compute or verify signatures with PEM keys, key files or a website certificate")


@dataclass
class CliState:
    config: AppConfig
    debug: bool = False


def _fail(exc: Exception, debug: bool) -> NoReturn:
    if debug:
        raise exc
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pemsign {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    list_algs: bool = typer.Option(False, "-A", "--list-algorithms", help="Print supported algorithms as JSON"),
    debug: bool = typer.Option(False, "-D", "--debug", help="Let errors surface with a traceback"),
    config: Optional[Path] = typer.Option(None, "--config", metavar="PATH"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    if list_algs:
        typer.echo(json.dumps(list_algorithms(), indent=4))
        raise typer.Exit(code=0)
    try:
        app_config = load_config(config)
    except ValueError as exc:
        _fail(exc, debug)
    configure_logging(app_config.logging.normalized_level())
    ctx.obj = CliState(config=app_config, debug=debug)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def _format_result(result: Optional[Result]) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result)


def _report(outcome: BatchOutcome, debug: bool) -> None:
    if len(outcome.entries) == 1:
        entry = outcome.entries[0]
        if entry.error is not None:
            _fail(PemSignError(entry.error), debug)
        typer.echo(_format_result(entry.result))
        return
    typer.echo(json.dumps([entry.as_dict() for entry in outcome.entries], indent=4))


def _run(
    ctx: typer.Context,
    action: Action,
    pem: Optional[str],
    algorithm: Optional[str],
    inputs: Optional[List[str]],
    signatures: Optional[List[str]] = None,
) -> None:
    state: CliState = ctx.obj
    template = OperationRequest(
        action=action,
        pem=pem,
        algorithm=algorithm,
        debug=state.debug,
        encoding=state.config.io.encoding,
        timeout=state.config.network.timeout,
        verify_tls=state.config.network.verify_tls,
    )
    try:
        outcome = asyncio.run(run_batch(template, inputs or [], signatures or []))
    except PemSignError as exc:
        _fail(exc, state.debug)
    _report(outcome, state.debug)
    raise typer.Exit(code=outcome.exit_code)


@app.command()
def sign(
    ctx: typer.Context,
    pem: Optional[str] = typer.Option(None, "-p", "--pem", help="Private key: PEM text or PEM file"),
    algorithm: Optional[str] = typer.Option(None, "-a", "--algorithm", help="Signature algorithm, e.g. SHA256withRSA"),
    inputs: Optional[List[str]] = typer.Option(None, "-i", "--input", help="File to process (repeatable)"),
) -> None:
    """Compute a signature"""
    _run(ctx, Action.SIGN, pem, algorithm, inputs)


@app.command()
def verify(
    ctx: typer.Context,
    pem: Optional[str] = typer.Option(
        None, "-p", "--pem", help="Public key or certificate: PEM text, PEM file or https URL"
    ),
    algorithm: Optional[str] = typer.Option(None, "-a", "--algorithm", help="Signature algorithm, e.g. SHA256withRSA"),
    inputs: Optional[List[str]] = typer.Option(None, "-i", "--input", help="File to process (repeatable)"),
    signatures: Optional[List[str]] = typer.Option(
        None, "-s", "--signature", help="Signature file, paired with --input by position (repeatable)"
    ),
) -> None:
    """Verify a signature"""
    _run(ctx, Action.VERIFY, pem, algorithm, inputs, signatures)


if __name__ == "__main__":  # pragma: no cover
    app()
