"""Text-generation client used by the evaluation and question pipelines.

Pipelines take an LLM callable matching the protocol:

    async def __call__(self, stage: str, prompt: str) -> str: ...

`stage` names the calling pipeline ("evaluator" or "question_generator") and
selects the sampling settings in STAGE_SETTINGS. Scoring wants a short,
near-deterministic reply; question generation wants a long, varied one.

    HttpLLM   — KoboldCpp or OpenAI-compatible completion endpoint.
    EchoLLM   — hands the prompt back. Lets the kiosk run without a model;
                evaluations then carry no score and count for nothing.

create_app() builds one from the environment (llm_from_env) and keeps it on
app.state. Tests pass a stub callable instead.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Literal, Protocol

import httpx

logger = logging.getLogger(__name__)


class LLM(Protocol):
    async def __call__(self, stage: str, prompt: str) -> str: ...


class LLMError(RuntimeError):
    """The text-generation service was unreachable or answered badly."""


@dataclass(frozen=True)
class GenerationSettings:
    max_tokens: int = 200
    temperature: float = 0.7
    stop: tuple[str, ...] = field(default_factory=tuple)


STAGE_SETTINGS: dict[str, GenerationSettings] = {
    "evaluator": GenerationSettings(max_tokens=160, temperature=0.3, stop=("\n\n\n",)),
    "question_generator": GenerationSettings(max_tokens=900, temperature=0.9),
}


ProviderFormat = Literal["koboldcpp", "openai"]


@dataclass(frozen=True)
class _Wire:
    path: str
    max_tokens_key: str
    stop_key: str
    results_key: str


_WIRES: dict[str, _Wire] = {
    "koboldcpp": _Wire("/api/v1/generate", "max_length", "stop_sequence", "results"),
    "openai": _Wire("/v1/completions", "max_tokens", "stop", "choices"),
}


class HttpLLM:
    """Async completion client.

    Args:
        provider_url:    Base URL, e.g. "http://localhost:5001".
        api_key:         Bearer token; empty when the service needs none.
        provider_format: "koboldcpp" (POST /api/v1/generate, reply under
                         "results") or "openai" (POST /v1/completions, reply
                         under "choices").
        model:           Model name, sent with the openai format only.
        timeout:         Seconds before a request is abandoned.
    """

    def __init__(
        self,
        provider_url: str,
        api_key: str = "",
        provider_format: ProviderFormat = "koboldcpp",
        model: str = "",
        timeout: float = 60.0,
    ) -> None:
        self._base_url = provider_url.rstrip("/")
        self._api_key = api_key
        self._format = provider_format
        self._wire = _WIRES[provider_format]
        self._model = model
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._base_url + self._wire.path

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _body(self, stage: str, prompt: str) -> dict:
        settings = STAGE_SETTINGS.get(stage, GenerationSettings())
        body: dict = {
            "prompt": prompt,
            self._wire.max_tokens_key: settings.max_tokens,
            "temperature": settings.temperature,
        }
        if settings.stop:
            body[self._wire.stop_key] = list(settings.stop)
        if self._format == "openai" and self._model:
            body["model"] = self._model
        return body

    def _completion_text(self, data: object) -> str:
        items = data.get(self._wire.results_key) if isinstance(data, dict) else None
        first = items[0] if isinstance(items, list) and items else None
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str):
            raise LLMError(f"Unexpected response format from {self._format} service")
        return text

    async def __call__(self, stage: str, prompt: str) -> str:
        logger.debug("llm call stage=%s url=%s prompt_len=%d", stage, self.url, len(prompt))
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self.url, json=self._body(stage, prompt), headers=self._headers()
                )
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to text generation at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(f"Text generation returned HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise LLMError(f"Text generation timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Text generation request failed: {e!r}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("Text generation returned a non-JSON body") from e
        text = self._completion_text(data).strip()
        logger.debug("llm reply stage=%s len=%d", stage, len(text))
        return text


class EchoLLM:
    """No network: returns the prompt."""

    async def __call__(self, stage: str, prompt: str) -> str:
        logger.debug("echo stage=%s prompt_len=%d", stage, len(prompt))
        return prompt


def llm_from_env() -> LLM:
    """Build the client from LLM_* variables; EchoLLM when no URL is set."""
    url = os.getenv("LLM_PROVIDER_URL", "")
    if not url:
        logger.warning("LLM_PROVIDER_URL not set, answers will not be scored")
        return EchoLLM()
    fmt = os.getenv("LLM_PROVIDER_FORMAT", "koboldcpp")
    if fmt not in _WIRES:
        logger.warning("Unknown LLM_PROVIDER_FORMAT %r, falling back to koboldcpp", fmt)
        fmt = "koboldcpp"
    return HttpLLM(
        provider_url=url,
        api_key=os.getenv("LLM_API_KEY", ""),
        provider_format=fmt,
        model=os.getenv("LLM_MODEL", ""),
        timeout=float(os.getenv("LLM_TIMEOUT", "60")),
    )
