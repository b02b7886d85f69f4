from __future__ import annotations

from pathlib import Path

from vetta.configuration import Settings
from vetta.orchestration import collect_health_report
from vetta.orchestration.diagnostics import get_proxy_environment


def _check(report, name: str):
    return next(check for check in report.checks if check.name == name)


def test_health_report_passes_with_api_key() -> None:
    report = collect_health_report(Settings(), environ={"OPENROUTER_API_KEY": "sk-1234"})

    assert report.overall_status == "PASS"
    assert _check(report, "Analysis API key").detail == (
        "OPENROUTER_API_KEY detected (7 characters)."
    )
    assert "built-in defaults" in _check(report, "Settings").detail


def test_health_report_fails_without_api_key() -> None:
    report = collect_health_report(Settings(), environ={})

    api_key = _check(report, "Analysis API key")
    assert report.overall_status == "FAIL"
    assert api_key.status == "FAIL"
    assert "OPENROUTER_API_KEY" in api_key.remediation


def test_health_report_lists_proxy_variables() -> None:
    report = collect_health_report(
        Settings(),
        environ={"OPENROUTER_API_KEY": "sk", "HTTPS_PROXY": "http://proxy:8080"},
    )

    proxy = _check(report, "Proxy configuration")
    assert proxy.status == "PASS"
    assert "HTTPS_PROXY" in proxy.detail


def test_health_report_names_settings_source(tmp_path: Path) -> None:
    source = tmp_path / "vetta.yaml"
    report = collect_health_report(Settings(source=source), environ={"OPENROUTER_API_KEY": "sk"})

    assert str(source) in _check(report, "Settings").detail


def test_get_proxy_environment_keeps_unset_entries() -> None:
    assert get_proxy_environment({"NO_PROXY": "localhost"}) == {
        "HTTPS_PROXY": None,
        "HTTP_PROXY": None,
        "NO_PROXY": "localhost",
    }
