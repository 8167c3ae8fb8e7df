"""HTTP client the kiosk uses to reach the Medieval Shop API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from medieval_shop.models import Failed, PlayerProfile, Success
from medieval_shop.progression import extract_score, villager_reaction

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"

GENERIC_FAILURE = "The oracle is silent. Pray try again anon."


class KioskClient:
    """Async wrapper around the API endpoints for one visitor.

    Args:
        visitor_id:  Stable id for this browser/kiosk player.
        base_url:    API root including the /api prefix.
        timeout:     HTTP timeout in seconds.
        transport:   Optional httpx transport (tests pass a MockTransport).
    """

    def __init__(
        self,
        visitor_id: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.visitor_id = visitor_id
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={"X-Visitor-Id": self.visitor_id},
            transport=self._transport,
        )

    async def get_profile(self, user_agent: str = "") -> PlayerProfile:
        """GET /player/{visitor_id}. Raises httpx.HTTPError on failure."""
        headers = {"User-Agent": user_agent} if user_agent else {}
        async with self._client() as c:
            r = await c.get(f"/player/{self.visitor_id}", headers=headers)
            r.raise_for_status()
            data: dict[str, Any] = r.json()
        profile = PlayerProfile.model_validate(data)
        profile.browser = data.get("browser", "unknown")
        return profile

    async def get_settings(self) -> dict[str, Any]:
        """GET /settings: default questions and bonus NPC tables."""
        async with self._client() as c:
            r = await c.get("/settings")
            r.raise_for_status()
            return r.json()

    async def fetch_questions(self, count: int) -> list[str]:
        """GET /generate-questions. Raises on transport errors or a bad payload."""
        async with self._client() as c:
            r = await c.get("/generate-questions", params={"count": count})
            r.raise_for_status()
            data = r.json()
        questions = data.get("questions") if isinstance(data, dict) else None
        if not isinstance(questions, list):
            raise ValueError("questions payload missing")
        logger.debug("fetched %d questions status=%s", len(questions), data.get("status"))
        return questions

    async def evaluate(self, question: str, answer: str) -> Success | Failed:
        """POST /evaluate. Never raises; failures become Failed."""
        try:
            async with self._client() as c:
                r = await c.post("/evaluate", json={"question": question, "answer": answer})
        except httpx.HTTPError as e:
            logger.error("evaluate request failed: %s", e)
            return Failed(reason=GENERIC_FAILURE)

        if r.status_code == 400:
            return Failed(reason="Both the question and thy answer are needed.")
        data = _json_object(r)
        if r.status_code >= 400:
            logger.error("evaluate returned HTTP %d", r.status_code)
            message = data.get("message") if data else None
            return Failed(reason=message if isinstance(message, str) and message else GENERIC_FAILURE)

        feedback = data.get("feedback", "") if data is not None else None
        if not isinstance(feedback, str):
            logger.error("evaluate returned an unexpected body: %.200s", r.text)
            return Failed(reason=GENERIC_FAILURE)
        score = extract_score(feedback)
        return Success(
            feedback_text=feedback,
            score=score or 0,
            reaction=villager_reaction(score) if score is not None else None,
        )

    async def request_hints(self, phone_number: str | None = None) -> bool:
        try:
            async with self._client() as c:
                r = await c.post("/request-hints", json={"phone_number": phone_number})
                r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("hint request failed: %s", e)
            return False
        data = _json_object(r)
        return bool(data and data.get("success"))


def _json_object(r: httpx.Response) -> dict[str, Any] | None:
    """The response body when it is a JSON object, else None."""
    try:
        data = r.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
