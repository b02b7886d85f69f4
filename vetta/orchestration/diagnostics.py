"""Offline diagnostics helpers for the Vetta CLI."""
from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Tuple

from vetta.configuration import Settings

_PROXY_VARIABLES = ("HTTPS_PROXY", "HTTP_PROXY", "NO_PROXY")


@dataclass(frozen=True)
class HealthCheck:
    """Represents the outcome of an individual health validation."""

    name: str
    status: str
    detail: str
    remediation: str | None = None


@dataclass(frozen=True)
class HealthReport:
    """Aggregated health diagnostics for the Vetta CLI."""

    python_version: str
    settings: Settings
    checks: Tuple[HealthCheck, ...]

    @property
    def overall_status(self) -> str:
        """Summarise overall readiness based on individual checks."""

        return "PASS" if all(check.status == "PASS" for check in self.checks) else "FAIL"


def collect_health_report(
    settings: Settings,
    *,
    environ: Mapping[str, str] | None = None,
) -> HealthReport:
    """Gather offline diagnostics without invoking external services."""

    env = os.environ if environ is None else environ
    checks = (
        check_python_version(),
        check_api_key(settings, env),
        check_proxy_configuration(env),
        check_settings(settings),
    )
    return HealthReport(
        python_version=format_python_version(),
        settings=settings,
        checks=checks,
    )


def check_python_version() -> HealthCheck:
    version = format_python_version()
    if sys.version_info >= (3, 10):
        detail = f"Detected Python {version}; compatible with Vetta requirements."
        return HealthCheck(name="Python runtime", status="PASS", detail=detail)

    return HealthCheck(
        name="Python runtime",
        status="FAIL",
        detail=f"Detected Python {version}; Vetta requires 3.10 or newer.",
        remediation="Install Python 3.10+ and recreate the virtual environment.",
    )


def check_api_key(settings: Settings, environ: Mapping[str, str]) -> HealthCheck:
    name = settings.api_key_env
    api_key = settings.api_key(environ)
    if api_key:
        detail = f"{name} detected ({len(api_key)} characters)."
        return HealthCheck(name="Analysis API key", status="PASS", detail=detail)

    return HealthCheck(
        name="Analysis API key",
        status="FAIL",
        detail=f"{name} is not configured.",
        remediation=f"Set {name} before running 'vetta analyze'. Example: export {name}='sk-...'.",
    )


def check_proxy_configuration(environ: Mapping[str, str]) -> HealthCheck:
    proxies = get_proxy_environment(environ)
    configured = ", ".join(name for name, value in proxies.items() if value)
    if configured:
        return HealthCheck(
            name="Proxy configuration",
            status="PASS",
            detail=f"Proxy variables detected: {configured}.",
        )

    return HealthCheck(
        name="Proxy configuration",
        status="PASS",
        detail="No proxy environment variables detected; direct internet access assumed.",
    )


def check_settings(settings: Settings) -> HealthCheck:
    origin = str(settings.source) if settings.source else "built-in defaults"
    detail = (
        f"Using {origin}: model {settings.model}, advanced model {settings.advanced_model}, "
        f"timeout {settings.request_timeout_seconds:.0f}s."
    )
    return HealthCheck(name="Settings", status="PASS", detail=detail)


def get_proxy_environment(environ: Mapping[str, str] | None = None) -> dict[str, str | None]:
    """Return proxy-related environment variables, preserving unset entries as None."""

    env = os.environ if environ is None else environ
    return {name: env.get(name) for name in _PROXY_VARIABLES}


def format_python_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"


__all__ = [
    "HealthCheck",
    "HealthReport",
    "collect_health_report",
    "get_proxy_environment",
]
