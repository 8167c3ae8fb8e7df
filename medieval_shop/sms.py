"""Outbound SMS client and inbound reply markup.

The pipelines take a sender matching the protocol:

    async def send(self, to: str, body: str) -> bool: ...

    HttpSmsSender  — posts to a Twilio-compatible Messages endpoint.
    NullSmsSender  — logs and reports failure. Used when no provider is set.

Sending is best-effort: failures are logged and reported as False, never
raised to the caller.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol
from xml.sax.saxutils import escape

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.twilio.com/2010-04-01"


class SmsSender(Protocol):
    async def send(self, to: str, body: str) -> bool: ...


class HttpSmsSender:
    """Async client for a Twilio-compatible REST API.

    Args:
        account_sid:  Account identifier, also the basic-auth user.
        auth_token:   Basic-auth password.
        from_number:  Sender phone number in E.164 form.
        api_url:      Base URL. Defaults to the Twilio 2010-04-01 API.
        timeout:      HTTP timeout in seconds.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
    ) -> None:
        self._sid = account_sid
        self._token = auth_token
        self._from = from_number
        self._base_url = api_url.rstrip("/")
        self._timeout = timeout

    def _messages_url(self) -> str:
        return f"{self._base_url}/Accounts/{self._sid}/Messages.json"

    async def send(self, to: str, body: str) -> bool:
        if not to:
            return False
        form = {"To": to, "From": self._from, "Body": body}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._messages_url(), data=form, auth=(self._sid, self._token)
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("SMS provider returned HTTP %d", e.response.status_code)
            return False
        except httpx.HTTPError as e:
            logger.error("SMS send failed: %s", e)
            return False
        logger.info("sms sent to=%s len=%d", to, len(body))
        return True


class NullSmsSender:
    """Drops every message. No network calls."""

    async def send(self, to: str, body: str) -> bool:
        logger.info("SMS disabled: dropped message to %s", to)
        return False


def sms_from_env() -> SmsSender:
    sid = os.getenv("SMS_ACCOUNT_SID", "")
    token = os.getenv("SMS_AUTH_TOKEN", "")
    from_number = os.getenv("SMS_FROM_NUMBER", "")
    if not (sid and token and from_number):
        return NullSmsSender()
    return HttpSmsSender(
        sid, token, from_number, api_url=os.getenv("SMS_API_URL", DEFAULT_API_URL)
    )


def twiml_reply(text: str) -> str:
    """Wrap a reply in TwiML markup for the inbound webhook."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<Response><Message>{escape(text)}</Message></Response>"
    )
