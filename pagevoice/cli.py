"""Command-line interface for Pagevoice.

Responsibilities:
- Expose user-facing commands for page-range conversion and credentials.
- Convert CLI arguments into `PagevoiceConfig` and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_conversion_summary, exit_with_command_error
from .cli_runtime import prompt_hidden_api_key, resolve_speech_runtime_sources
from .config import ConfigLoader, PagevoiceConfig, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import PipelineStageError
from .pipeline import PagevoicePipeline
from .pipeline.runtime import resolve_speech_runtime
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="pagevoice",
    no_args_is_help=True,
    help="Pagevoice CLI: render PDF pages and read them aloud.",
)


class ConvertProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _load_yaml_config(config_path: Path | None) -> PagevoiceConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _resolve_command_base_config(
    config_file: Path | None,
    input_pdf: Path | None,
    out: Path | None,
    start: str | None,
    end: str | None,
    scale: float | None,
    image_format: str | None,
) -> PagevoiceConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)

    if loaded_config is None:
        if input_pdf is None:
            raise PipelineStageError(
                stage="config",
                detail="Input PDF path is required when `--config` is not provided.",
                hint="Pass `<input.pdf>` or use `--config <path.yaml>` with `input_pdf`.",
            )
        loaded_config = PagevoiceConfig(input_pdf=input_pdf, output_dir=Path("out"))

    overrides: dict[str, object] = {}
    if input_pdf is not None:
        overrides["input_pdf"] = input_pdf
    if out is not None:
        overrides["output_dir"] = out
    if start is not None:
        overrides["start_page"] = start
    if end is not None:
        overrides["end_page"] = end
    if scale is not None:
        overrides["render_scale"] = scale
    if image_format is not None:
        overrides["image_format"] = image_format.strip().lower()
    return replace(loaded_config, **overrides)


@app.command("convert")
def convert_command(
    input_pdf: Annotated[
        Path | None,
        typer.Argument(
            help="Path to source PDF. Required unless provided by `--config`.",
        ),
    ] = None,
    start: Annotated[
        str | None,
        typer.Option("--start", help="First page to convert (1-based)."),
    ] = None,
    end: Annotated[
        str | None,
        typer.Option(
            "--end",
            help="Last page to convert (1-based, inclusive); clamped to the page count.",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output directory (overrides config file value)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to YAML config file with command defaults.",
        ),
    ] = None,
    scale: Annotated[
        float | None,
        typer.Option("--scale", help="Page render magnification (default 1.5)."),
    ] = None,
    image_format: Annotated[
        str | None,
        typer.Option("--image-format", help="Page image format: `png` or `jpeg`."),
    ] = None,
    speech_endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", help="Speech inference endpoint URL override."),
    ] = None,
    timeout_seconds: Annotated[
        float | None,
        typer.Option("--timeout", help="Speech request timeout in seconds."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option(
            "--api-key",
            help="Speech API key override. Prefer `--prompt-api-key` to avoid shell history.",
        ),
    ] = None,
    prompt_api_key: Annotated[
        bool,
        typer.Option(
            "--prompt-api-key",
            help="Prompt for API key with hidden input (never echoed).",
        ),
    ] = False,
    store_api_key: Annotated[
        bool,
        typer.Option(
            "--store-api-key/--no-store-api-key",
            help="Persist CLI-entered API key to secure credential storage.",
        ),
    ] = True,
) -> None:
    """Render a page range, build its transcript, and synthesize speech."""

    pipeline: PagevoicePipeline | None = None
    try:
        runtime_cli_values, runtime_secure_values = resolve_speech_runtime_sources(
            speech_endpoint=speech_endpoint,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            credential_store_factory=create_credential_store,
        )
        base_config = _resolve_command_base_config(
            config_file=config_file,
            input_pdf=input_pdf,
            out=out,
            start=start,
            end=end,
            scale=scale,
            image_format=image_format,
        )
        config = replace(
            base_config,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ,
            ),
        )
        if resolve_speech_runtime(config).api_key is None:
            typer.secho(
                "No speech API key configured; the speech service may reject the request.",
                fg=typer.colors.YELLOW,
                err=True,
            )
        progress = ConvertProgressIndicator(command_name="convert")
        pipeline = PagevoicePipeline(
            run_logger=RunLogger(),
            stage_progress_callback=progress.on_stage_start,
        )
        manifest = pipeline.convert(config)
    except Exception as exc:
        exit_with_command_error("convert", exc)
    finally:
        if pipeline is not None:
            pipeline.close()

    echo_conversion_summary(manifest)


@app.command("info")
def info_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
) -> None:
    """Print the page count of a PDF."""

    try:
        file_bytes = input_pdf.read_bytes()
        page_count = PagevoicePipeline().page_count(file_bytes)
    except Exception as exc:
        exit_with_command_error("info", exc)

    typer.echo(f"Pages: {page_count}")


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage securely stored CLI credentials."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = prompt_hidden_api_key()
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        removed = credential_store.clear_api_key()
        if removed:
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    has_stored_key = credential_store.get_api_key() is not None
    status = "present" if has_stored_key else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored speech API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
