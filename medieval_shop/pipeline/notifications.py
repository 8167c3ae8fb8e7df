"""Milestone and hint messages, plus inbound SMS command handling."""

import logging

from medieval_shop import storage
from medieval_shop.errors import UpstreamUnavailable
from medieval_shop.models import PlayerProfile
from medieval_shop.progression import session_summary
from medieval_shop.sms import SmsSender

logger = logging.getLogger(__name__)


class Notifier:
    """Sends best-effort text messages to players with a registered number."""

    def __init__(self, sender: SmsSender) -> None:
        self._sender = sender

    async def milestone(self, profile: PlayerProfile, title: str) -> bool:
        if not profile.phone_number:
            return False
        body = f"Huzzah! Thou art now known as {title}. The villagers sing thy praises."
        return await self._sender.send(profile.phone_number, body)

    async def hints(self, profile: PlayerProfile) -> bool:
        if not profile.phone_number:
            return False
        tips = storage.get_config()["tips"]
        body = "Words of wisdom:\n" + "\n".join(f"- {t}" for t in tips)
        return await self._sender.send(profile.phone_number, body)


def handle_inbound(from_number: str, body: str) -> str:
    """Reply text for an inbound SMS command. Never raises.

    WISDOM → tips, SCROLL → progress summary, anything else → help text.
    """
    config = storage.get_config()
    command = (body or "").strip().upper()

    if command == "WISDOM":
        return "Words of wisdom:\n" + "\n".join(f"- {t}" for t in config["tips"])

    if command == "SCROLL":
        try:
            profile = storage.find_profile_by_phone(from_number or "")
        except UpstreamUnavailable as e:
            logger.error("scroll lookup failed: %s", e)
            profile = None
        if profile is None:
            return "No scroll beareth thy name. Visit the shop and request hints to register."
        return session_summary(profile)

    return config["help_text"]
