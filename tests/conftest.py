from __future__ import annotations

import pytest

from vetta.pipeline import AnalysisRequest, UploadedFile


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer settings and credentials out of the tests."""

    for key in (
        "OPENROUTER_API_KEY",
        "VETTA_CONFIG",
        "VETTA_ENDPOINT",
        "VETTA_MODEL",
        "VETTA_ADVANCED_MODEL",
        "VETTA_REQUEST_TIMEOUT",
        "VETTA_PACING_DELAY",
        "HTTPS_PROXY",
        "HTTP_PROXY",
        "NO_PROXY",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def resume_file() -> UploadedFile:
    """A 50 KB PDF-like upload."""

    return UploadedFile(name="resume.pdf", content=b"%PDF-1.7\n" + b"0" * (50 * 1024))


@pytest.fixture
def request_factory(resume_file: UploadedFile):
    def _build(
        job_description: str = "Senior Engineer",
        *,
        file: UploadedFile | None = resume_file,
        advanced: bool = False,
    ) -> AnalysisRequest:
        return AnalysisRequest(file=file, job_description=job_description, advanced=advanced)

    return _build
