"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and conversion summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import RunManifest


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_conversion_summary(manifest: RunManifest) -> None:
    """Print validated range, written deliverables, and audio availability."""

    typer.echo(f"Run id: {manifest.run_id}")
    typer.echo(f"Pages: {manifest.page_range.start}-{manifest.page_range.end}")
    for path in manifest.page_images:
        typer.echo(f"Page image: {path}")
    typer.echo(f"Transcript: {manifest.transcript_path}")
    if manifest.audio_path is not None:
        typer.echo(f"Audio: {manifest.audio_path}")
    else:
        typer.secho("No audio available.", fg=typer.colors.YELLOW)
        synthesis_error = manifest.extra.get("synthesis_error")
        if synthesis_error:
            typer.secho(f"Speech synthesis failed: {synthesis_error}", fg=typer.colors.YELLOW)
    typer.echo(f"Manifest: {manifest.extra.get('manifest_path', '(not written)')}")
