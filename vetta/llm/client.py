"""HTTP client helpers for interacting with OpenRouter."""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping

import httpx

from vetta.configuration import Settings
from vetta.errors import AnalysisFailure, AnalysisRequestError
from vetta.llm.prompts import build_messages

logger = logging.getLogger("vetta.llm.client")

_REFERER = "https://vetta-cli.local/analyze"
_TITLE = "Vetta Resume Analysis"
_AUTH_STATUS_CODES = frozenset({401, 403})


class OpenRouterAnalysisClient:
    """Async analysis capability backed by the OpenRouter chat completions API."""

    def __init__(
        self,
        settings: Settings,
        *,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._api_key = api_key if api_key is not None else settings.api_key()
        self._transport = transport

    async def critique(
        self,
        resume_text: str,
        job_description: str,
        *,
        advanced: bool = False,
    ) -> str:
        """Request a free-text critique; raises AnalysisRequestError on any failure."""

        if not self._api_key:
            raise AnalysisRequestError(
                message=f"API key is not configured ({self._settings.api_key_env} is unset).",
                remediation=f"Set {self._settings.api_key_env} before running 'vetta analyze'.",
                reason=AnalysisFailure.AUTH,
            )

        settings = self._settings
        payload = {
            "model": settings.advanced_model if advanced else settings.model,
            "messages": build_messages(resume_text, job_description, advanced=advanced),
            "max_tokens": settings.advanced_max_tokens if advanced else settings.max_tokens,
            "temperature": settings.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Referer": _REFERER,
            "X-Title": _TITLE,
        }

        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=settings.request_timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
                headers=headers,
                trust_env=True,
            ) as client:
                response = await client.post(settings.endpoint, json=payload)
        except httpx.TimeoutException as exc:
            raise AnalysisRequestError(
                message="OpenRouter did not respond before the request timeout.",
                remediation="Verify network connectivity or raise request_timeout_seconds.",
                reason=AnalysisFailure.TIMEOUT,
            ) from exc
        except httpx.HTTPError as exc:
            raise AnalysisRequestError(
                message="Unable to reach OpenRouter.",
                remediation=(
                    "Review HTTPS_PROXY/HTTP_PROXY settings or retry with a stable connection."
                ),
                reason=AnalysisFailure.NETWORK,
            ) from exc

        latency = time.perf_counter() - start
        logger.info(
            "Analysis service responded",
            extra={
                "status_code": response.status_code,
                "latency_seconds": round(latency, 3),
                "request_id": response.headers.get("x-request-id"),
                "advanced": advanced,
            },
        )

        if response.status_code in _AUTH_STATUS_CODES:
            raise AnalysisRequestError(
                message=f"OpenRouter rejected the API key (status {response.status_code}).",
                remediation="Validate API key permissions in the OpenRouter dashboard.",
                reason=AnalysisFailure.AUTH,
            )
        if response.status_code >= 400:
            raise AnalysisRequestError(
                message=_error_detail(response),
                remediation="Check https://status.openrouter.ai/ and retry later.",
                reason=AnalysisFailure.SERVICE,
            )

        return _parse_critique(response)


def _error_detail(response: httpx.Response) -> str:
    """Return the service's own error message, falling back to the status line."""

    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return f"OpenRouter responded with status {response.status_code}."


def _parse_critique(response: httpx.Response) -> str:
    """Pull the assistant message out of a chat completions response body."""

    try:
        body = response.json()
        content = body["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise AnalysisRequestError(
            message="OpenRouter returned a response without a completion message.",
            remediation="Retry the request; switch models if the problem persists.",
            reason=AnalysisFailure.MALFORMED_RESPONSE,
        ) from exc

    if not isinstance(content, str) or not content.strip():
        raise AnalysisRequestError(
            message="OpenRouter returned an empty completion.",
            remediation="Retry the request; switch models if the problem persists.",
            reason=AnalysisFailure.MALFORMED_RESPONSE,
        )
    return content.strip()


__all__ = ["OpenRouterAnalysisClient"]
