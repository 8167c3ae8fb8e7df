"""Kiosk wiring: question pool, bridge, dialogue and NPC lifecycle.

start():
  1. Fill the question pool (falls back to defaults, never fails).
  2. Look up the player profile and merge bonus NPCs. A failed lookup is
     logged and the game starts without bonus content.
  3. Mount the dialogue on the bridge and start the NPC lifecycle.
"""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from .bridge import SessionBridge
from .client import KioskClient
from .dialogue import DialogueController
from .lifecycle import NpcLifecycle, Timings
from .pool import QuestionPool
from .stage import Stage

logger = logging.getLogger(__name__)


class Kiosk:
    def __init__(
        self,
        client: KioskClient,
        stage: Stage,
        config: dict[str, Any],
        user_agent: str = "",
        timings: Timings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._user_agent = user_agent
        self.bridge = SessionBridge()
        self.pool = QuestionPool(
            client, config["default_questions"], config.get("generic_question", ""), rng=rng
        )
        self.dialogue = DialogueController(self.bridge, client)
        self.lifecycle = NpcLifecycle(stage, self.pool, self.bridge, timings=timings, rng=rng)
        self.profile = None

    async def start(self) -> None:
        await self.pool.refill()
        try:
            self.profile = await self._client.get_profile(self._user_agent)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("profile lookup failed, starting without bonus NPCs: %s", e)
        else:
            added = self.pool.merge_bonus(
                self.profile,
                self._config.get("browser_bonus", {}),
                self._config.get("visit_tiers", []),
            )
            if added:
                logger.info("bonus NPCs joined: %s", ", ".join(added))
        self.dialogue.mount()
        self.lifecycle.start()

    async def stop(self) -> None:
        await self.lifecycle.stop()
        await self.dialogue.unmount()
        await self.pool.close()
