"""Configuration model and loaders for Pagevoice.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide deterministic precedence resolution for speech service settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `PagevoiceConfig`: normalized runtime settings for a conversion run.
- `SpeechRuntimeConfig`: resolved speech endpoint, key, and timeout.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `PagevoiceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .io.page_renderer import DEFAULT_RENDER_SCALE
from .parsing import normalize_optional_string
from .tts.speech_client import DEFAULT_SPEECH_ENDPOINT

_DEFAULT_TIMEOUT_SECONDS = 60.0
_SUPPORTED_IMAGE_FORMATS = frozenset({"png", "jpeg"})


def _is_positive_number(value: float) -> bool:
    """Return whether `value` is finite and greater than zero; rejects nan and inf."""

    return math.isfinite(value) and value > 0


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SpeechRuntimeConfig:
    """Resolved speech service settings for one run.

    Attributes:
        endpoint: Inference endpoint URL receiving the transcript.
        api_key: Optional bearer token (resolved but never persisted in artifacts).
        timeout_seconds: Request timeout for the single synthesis attempt.
    """

    endpoint: str
    api_key: str | None = None
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS

    def as_manifest_metadata(self) -> dict[str, str]:
        """Return non-secret runtime metadata safe to persist in the manifest."""

        return {
            "speech_endpoint": self.endpoint,
            "speech_timeout_seconds": f"{self.timeout_seconds:g}",
            "speech_api_key": "set" if self.api_key else "missing",
        }


@dataclass(slots=True)
class PagevoiceConfig:
    """Runtime configuration for one conversion run.

    Attributes:
        input_pdf: Path to the source PDF.
        output_dir: Output directory for generated artifacts.
        start_page: Raw first page as entered by the user.
        end_page: Raw last page as entered by the user.
        render_scale: Magnification applied to every rendered page.
        image_format: Page image format (`png` or `jpeg`).
        speech_endpoint: Speech inference endpoint URL.
        api_key: Optional speech service API key.
        timeout_seconds: Speech request timeout in seconds.
        runtime_sources: Optional runtime source overrides injected by CLI.
        extra: Additional metadata recorded in the run manifest.
    """

    input_pdf: Path
    output_dir: Path
    start_page: str | None = None
    end_page: str | None = None
    render_scale: float = DEFAULT_RENDER_SCALE
    image_format: str = "png"
    speech_endpoint: str = DEFAULT_SPEECH_ENDPOINT
    api_key: str | None = None
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        if not _is_positive_number(self.render_scale):
            raise ValueError("`render_scale` must be a positive number.")
        if not _is_positive_number(self.timeout_seconds):
            raise ValueError("`timeout_seconds` must be a positive number.")
        if self.image_format not in _SUPPORTED_IMAGE_FORMATS:
            supported = ", ".join(sorted(_SUPPORTED_IMAGE_FORMATS))
            raise ValueError(
                f"Unsupported `image_format` value `{self.image_format}`; supported: {supported}."
            )
        self._require_non_empty(self.speech_endpoint, "speech_endpoint")

    def resolved_speech_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> SpeechRuntimeConfig:
        """Resolve speech settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        endpoint = self._resolve_runtime_value(
            key="speech_endpoint",
            env_key="PAGEVOICE_SPEECH_ENDPOINT",
            default_value=self.speech_endpoint,
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_key="PAGEVOICE_API_KEY",
            default_value=self.api_key,
            sources=resolved_sources,
        )
        timeout_text = self._resolve_runtime_value(
            key="timeout_seconds",
            env_key="PAGEVOICE_SPEECH_TIMEOUT",
            default_value=f"{self.timeout_seconds:g}",
            sources=resolved_sources,
        )
        return SpeechRuntimeConfig(
            endpoint=endpoint,
            api_key=api_key,
            timeout_seconds=self._parse_positive_float(timeout_text, "timeout_seconds"),
        )

    def _resolve_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a runtime value from sources in deterministic precedence order."""

        resolved = self._resolve_optional_runtime_value(key, env_key, default_value, sources)
        if resolved is None:
            raise ValueError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return resolved

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in deterministic order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = self._normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        env_value = self._normalized_lookup(sources.env, env_key)
        if env_value is not None:
            return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that runtime string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")

    @staticmethod
    def _parse_positive_float(value: str, field_name: str) -> float:
        try:
            parsed = float(value)
        except ValueError as exc:
            raise ValueError(f"`{field_name}` must be a positive number.") from exc
        if not _is_positive_number(parsed):
            raise ValueError(f"`{field_name}` must be a positive number.")
        return parsed


class ConfigLoader:
    """Factory methods for creating `PagevoiceConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"input_pdf"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "input_pdf",
            "output_dir",
            "start_page",
            "end_page",
            "render_scale",
            "image_format",
            "speech_endpoint",
            "api_key",
            "timeout_seconds",
            "extra",
        }
    )
    _RUNTIME_ENV_KEYS = frozenset(
        {
            "PAGEVOICE_SPEECH_ENDPOINT",
            "PAGEVOICE_SPEECH_TIMEOUT",
            "PAGEVOICE_API_KEY",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> PagevoiceConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> PagevoiceConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        input_pdf = ConfigLoader._optional_env_string(env_map, "PAGEVOICE_INPUT_PDF")
        if input_pdf is None:
            raise ValueError("Environment variable `PAGEVOICE_INPUT_PDF` is required.")
        output_dir = ConfigLoader._optional_env_string(env_map, "PAGEVOICE_OUTPUT_DIR") or "out"

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

        config = PagevoiceConfig(
            input_pdf=Path(input_pdf),
            output_dir=Path(output_dir),
            start_page=ConfigLoader._optional_env_string(env_map, "PAGEVOICE_START_PAGE"),
            end_page=ConfigLoader._optional_env_string(env_map, "PAGEVOICE_END_PAGE"),
            render_scale=ConfigLoader._optional_env_positive_float(
                env_map, "PAGEVOICE_RENDER_SCALE", DEFAULT_RENDER_SCALE
            ),
            image_format=(
                ConfigLoader._optional_env_string(env_map, "PAGEVOICE_IMAGE_FORMAT") or "png"
            ).lower(),
            speech_endpoint=(
                ConfigLoader._optional_env_string(env_map, "PAGEVOICE_SPEECH_ENDPOINT")
                or DEFAULT_SPEECH_ENDPOINT
            ),
            api_key=ConfigLoader._optional_env_string(env_map, "PAGEVOICE_API_KEY"),
            timeout_seconds=ConfigLoader._optional_env_positive_float(
                env_map, "PAGEVOICE_SPEECH_TIMEOUT", _DEFAULT_TIMEOUT_SECONDS
            ),
            runtime_sources=RuntimeConfigSources(env=runtime_env),
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> PagevoiceConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        input_pdf = ConfigLoader._optional_non_empty_string(payload, "input_pdf")
        if input_pdf is None:
            raise ValueError(f"{source_label} requires non-empty `input_pdf`.")
        output_dir = ConfigLoader._optional_non_empty_string(payload, "output_dir") or "out"
        image_format = ConfigLoader._optional_non_empty_string(payload, "image_format") or "png"

        config = PagevoiceConfig(
            input_pdf=Path(input_pdf),
            output_dir=Path(output_dir),
            start_page=ConfigLoader._optional_non_empty_string(payload, "start_page"),
            end_page=ConfigLoader._optional_non_empty_string(payload, "end_page"),
            render_scale=ConfigLoader._optional_positive_float(
                payload, "render_scale", source_label, default=DEFAULT_RENDER_SCALE
            ),
            image_format=image_format.lower(),
            speech_endpoint=(
                ConfigLoader._optional_non_empty_string(payload, "speech_endpoint")
                or DEFAULT_SPEECH_ENDPOINT
            ),
            api_key=ConfigLoader._optional_non_empty_string(payload, "api_key"),
            timeout_seconds=ConfigLoader._optional_positive_float(
                payload, "timeout_seconds", source_label, default=_DEFAULT_TIMEOUT_SECONDS
            ),
            extra=ConfigLoader._optional_string_map(payload, "extra", source_label),
        )
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported and required YAML keys."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        missing = sorted(
            key for key in ConfigLoader._REQUIRED_YAML_KEYS if key not in payload
        )
        if missing:
            key_list = ", ".join(missing)
            raise ValueError(f"{source_label} is missing required key(s): {key_list}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_positive_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        """Read and validate a positive number payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        normalized = normalize_optional_string(raw_value)
        if normalized is None:
            return default
        try:
            parsed = float(normalized)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.") from exc
        if not _is_positive_number(parsed):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        return parsed

    @staticmethod
    def _optional_string_map(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        if key not in payload:
            return {}

        raw = payload[key]
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank key.")
            if value_value is None:
                raise ValueError(
                    f"{source_label} field `{key}` contains blank value for `{key_value}`."
                )
            normalized[key_value] = value_value
        return normalized

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_float(env: Mapping[str, str], key: str, default: float) -> float:
        """Read an optional positive number from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return default
        try:
            parsed = float(raw_value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a positive number.") from exc
        if not _is_positive_number(parsed):
            raise ValueError(f"Environment variable `{key}` must be a positive number.")
        return parsed
