"""Rendering collaborator interface.

The kiosk core never draws anything. It tells a Stage which actor to bring
on, how long the walk should take, and when to remove it. A browser or game
engine front end implements this protocol; HeadlessStage just waits out the
durations, which is enough to run the kiosk without graphics.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

from medieval_shop.models import Actor

logger = logging.getLogger(__name__)


class Stage(Protocol):
    def loaded_types(self, candidates: Iterable[str]) -> list[str]:
        """Subset of candidates whose walk and idle assets loaded."""
        ...

    def has_assets(self, actor_type: str) -> bool: ...

    async def enter(self, actor: Actor, seconds: float) -> None:
        """Bring the actor from off-screen to the counter."""
        ...

    async def leave(self, actor: Actor, seconds: float) -> None:
        """Walk the actor from the counter back off-screen."""
        ...

    def destroy(self, actor: Actor) -> None: ...


class HeadlessStage:
    """A stage with no graphics.

    Args:
        available: Actor types treated as having assets. None means all.
    """

    def __init__(self, available: Iterable[str] | None = None) -> None:
        self._available = set(available) if available is not None else None

    def loaded_types(self, candidates: Iterable[str]) -> list[str]:
        return [t for t in candidates if self.has_assets(t)]

    def has_assets(self, actor_type: str) -> bool:
        return self._available is None or actor_type in self._available

    async def enter(self, actor: Actor, seconds: float) -> None:
        logger.debug("%s approaches the counter", actor.actor_type)
        await asyncio.sleep(seconds)

    async def leave(self, actor: Actor, seconds: float) -> None:
        logger.debug("%s departs", actor.actor_type)
        await asyncio.sleep(seconds)

    def destroy(self, actor: Actor) -> None:
        logger.debug("%s removed from stage", actor.actor_type)
