"""Runtime settings loading for Vetta."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from vetta.errors import ConfigurationError

CONFIG_ENV_VAR = "VETTA_CONFIG"
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

_ENV_OVERRIDES: dict[str, str] = {
    "VETTA_ENDPOINT": "endpoint",
    "VETTA_MODEL": "model",
    "VETTA_ADVANCED_MODEL": "advanced_model",
    "VETTA_REQUEST_TIMEOUT": "request_timeout_seconds",
    "VETTA_PACING_DELAY": "pacing_delay_seconds",
}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for a pipeline run."""

    endpoint: str = "https://openrouter.ai/api/v1/chat/completions"
    model: str = "openrouter/auto"
    advanced_model: str = "openrouter/auto"
    max_tokens: int = 1024
    advanced_max_tokens: int = 2048
    temperature: float = 0.4
    request_timeout_seconds: float = 60.0
    pacing_delay_seconds: float = 0.0
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    api_key_env: str = "OPENROUTER_API_KEY"
    source: Path | None = None

    def api_key(self, environ: Mapping[str, str] | None = None) -> str | None:
        """Return the configured API key, or None when it is unset or blank."""

        env = os.environ if environ is None else environ
        value = (env.get(self.api_key_env) or "").strip()
        return value or None


_FIELD_TYPES: dict[str, type] = {
    "endpoint": str,
    "model": str,
    "advanced_model": str,
    "max_tokens": int,
    "advanced_max_tokens": int,
    "temperature": float,
    "request_timeout_seconds": float,
    "pacing_delay_seconds": float,
    "max_file_size_bytes": int,
    "api_key_env": str,
}
_POSITIVE_FIELDS = frozenset(
    {"max_tokens", "advanced_max_tokens", "request_timeout_seconds", "max_file_size_bytes"}
)


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Layer defaults, an optional YAML file and environment overrides."""

    env = os.environ if environ is None else environ
    settings = Settings()

    config_path = path
    if config_path is None and env.get(CONFIG_ENV_VAR):
        config_path = Path(env[CONFIG_ENV_VAR])

    if config_path is not None:
        resolved = _resolve_path(config_path)
        payload = _load_yaml(resolved)
        settings = replace(settings, source=resolved, **_coerce_values(payload, str(resolved)))

    overrides = {
        field_name: env[variable]
        for variable, field_name in _ENV_OVERRIDES.items()
        if env.get(variable)
    }
    if overrides:
        settings = replace(settings, **_coerce_values(overrides, "environment"))

    return settings


def _resolve_path(path: Path) -> Path:
    candidate = path.expanduser()
    try:
        resolved = candidate.resolve()
    except OSError:
        resolved = candidate

    if not resolved.exists() or not resolved.is_file():
        raise ConfigurationError(
            message=f"Settings file {resolved} does not exist or is not a file.",
            remediation=f"Verify the --config path or unset {CONFIG_ENV_VAR}.",
        )
    return resolved


def _load_yaml(path: Path) -> dict:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            message=f"Unable to read settings file {path}.",
            remediation="Check file permissions and retry.",
        ) from exc

    try:
        loaded = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            message=f"Settings file {path} contains invalid YAML.",
            remediation="Ensure the file is a flat mapping of setting names to values.",
        ) from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            message=f"Settings file {path} must define a mapping at the root level.",
            remediation="Provide settings such as 'model' or 'request_timeout_seconds' as keys.",
        )
    return loaded


def _coerce_values(payload: Mapping[str, object], origin: str) -> dict[str, object]:
    known = {item.name for item in fields(Settings)} - {"source"}
    unknown = sorted(str(key) for key in payload if key not in known)
    if unknown:
        raise ConfigurationError(
            message=f"Unknown setting(s) in {origin}: {', '.join(unknown)}.",
            remediation=f"Supported settings: {', '.join(sorted(known))}.",
        )

    coerced: dict[str, object] = {}
    for name, value in payload.items():
        expected = _FIELD_TYPES[name]
        if isinstance(value, bool) or value is None:
            raise ConfigurationError(
                message=f"Setting '{name}' in {origin} must be a {expected.__name__}.",
                remediation="Remove the entry or provide a plain value.",
            )
        try:
            converted = expected(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                message=f"Setting '{name}' in {origin} must be a {expected.__name__}.",
                remediation="Correct the value and retry.",
            ) from exc

        if name in _POSITIVE_FIELDS and converted <= 0:
            raise ConfigurationError(
                message=f"Setting '{name}' in {origin} must be greater than zero.",
                remediation="Provide a positive value.",
            )
        if name == "pacing_delay_seconds" and converted < 0:
            raise ConfigurationError(
                message=f"Setting '{name}' in {origin} cannot be negative.",
                remediation="Use 0 to disable pacing.",
            )
        if expected is str and not converted.strip():
            raise ConfigurationError(
                message=f"Setting '{name}' in {origin} cannot be empty.",
                remediation="Remove the entry to use the default.",
            )
        coerced[name] = converted
    return coerced


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "Settings",
    "load_settings",
]
