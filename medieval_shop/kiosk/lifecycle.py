"""NPC lifecycle — one actor at a time walks up, asks, waits, and leaves.

Phases:
  SPAWNING        pick an actor type (uniform, never the same as the last
                  one when there is a choice); missing assets → retry a
                  different type after a backoff.
  APPROACHING     walk to the counter, draw a question, open the dialogue.
  AWAITING_ANSWER wait, without a timeout, for the bridge to deliver the
                  player's answer.
  DEPARTING       close the dialogue, walk off.
  DESPAWNED       remove the actor; after a short delay the next one spawns.

The whole cycle runs in one task owned by NpcLifecycle; stop() cancels it.
The lifecycle does not wait for answer evaluation; the dialogue does that
before it delivers the answer.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from medieval_shop.errors import ResourceMissing
from medieval_shop.models import Actor, ActorPhase

from .bridge import SessionBridge
from .pool import QuestionPool
from .stage import Stage

logger = logging.getLogger(__name__)

PhaseListener = Callable[[Actor], None]


@dataclass
class Timings:
    """Durations in seconds for the timed transitions."""

    fade_in: float = 0.5
    approach: float = 4.0
    depart: float = 4.0
    respawn_delay: float = 1.0
    retry_backoff: float = 1.0


class NpcLifecycle:
    def __init__(
        self,
        stage: Stage,
        pool: QuestionPool,
        bridge: SessionBridge,
        timings: Timings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._stage = stage
        self._pool = pool
        self._bridge = bridge
        self._timings = timings or Timings()
        self._rng = rng or random.Random()
        self._task: asyncio.Task | None = None
        self._listeners: list[PhaseListener] = []
        self.actor: Actor | None = None
        self.last_type: str | None = None
        self.history: list[str] = []
        self.loaded_types: list[str] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_phase(self, listener: PhaseListener) -> None:
        self._listeners.append(listener)

    def _enter(self, actor: Actor, phase: ActorPhase) -> None:
        actor.phase = phase
        logger.debug("%s → %s", actor.actor_type, phase.value)
        for listener in self._listeners:
            listener(actor)

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self.loaded_types = self._stage.loaded_types(self._pool.actor_types)
        if not self.loaded_types:
            logger.warning("no actor type has assets; spawning from the full list")
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._bridge.clear_handler()
        if self.actor is not None:
            self._stage.destroy(self.actor)
            self.actor = None

    async def run(self, cycles: int | None = None) -> None:
        """Run spawn cycles until cancelled (or `cycles` completed)."""
        done = 0
        while cycles is None or done < cycles:
            await self.run_cycle()
            done += 1

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def available_types(self) -> list[str]:
        """Actor types to pick from: loaded base types plus merged bonus types."""
        candidates = self._pool.actor_types
        if not self.loaded_types:
            return candidates
        loaded = set(self.loaded_types)
        return [t for t in candidates if t in loaded or self._stage.has_assets(t)]

    def pick_type(self, candidates: list[str] | None = None) -> str:
        """Uniform pick, never the previous type when another candidate exists."""
        candidates = self.available_types() if candidates is None else candidates
        if not candidates:
            raise ResourceMissing("any actor")
        choices = [t for t in candidates if t != self.last_type]
        return self._rng.choice(choices or candidates)

    async def spawn(self) -> Actor:
        """Pick a type with assets, retrying after a backoff on missing assets.

        Once every candidate has failed, waits and starts over with the full
        list, so assets that load late are still picked up.
        """
        missing: set[str] = set()
        while True:
            candidates = [t for t in self.available_types() if t not in missing]
            if not candidates:
                logger.error("%s; retrying every actor type", ResourceMissing("any actor"))
                missing.clear()
                await asyncio.sleep(self._timings.retry_backoff)
                continue
            actor_type = self.pick_type(candidates)
            if not self._stage.has_assets(actor_type):
                logger.error("%s; retrying with a different actor", ResourceMissing(actor_type))
                missing.add(actor_type)
                await asyncio.sleep(self._timings.retry_backoff)
                continue
            self.last_type = actor_type
            actor = Actor(actor_type=actor_type)
            self.actor = actor
            self.history.append(actor_type)
            self._enter(actor, ActorPhase.SPAWNING)
            return actor

    # ------------------------------------------------------------------
    # One full cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> Actor:
        actor = await self.spawn()

        await asyncio.sleep(self._timings.fade_in)
        self._enter(actor, ActorPhase.APPROACHING)
        await self._stage.enter(actor, self._timings.approach)

        actor.assigned_question = self._pool.draw(actor.actor_type)
        answer_future = self._bridge.expect_answer()
        self._bridge.show(actor.assigned_question, actor.actor_type)
        self._enter(actor, ActorPhase.AWAITING_ANSWER)

        actor.assigned_answer = await answer_future

        self._enter(actor, ActorPhase.DEPARTING)
        self._bridge.hide()
        await self._stage.leave(actor, self._timings.depart)

        self._stage.destroy(actor)
        self.actor = None
        self._enter(actor, ActorPhase.DESPAWNED)
        await asyncio.sleep(self._timings.respawn_delay)
        return actor
