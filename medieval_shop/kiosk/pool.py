"""Question pool — keeps prompts flowing to NPCs without blocking them.

draw() is synchronous: it takes a random question from the pool, or, when
the pool is empty, returns the actor type's default question at once and
starts a background refill. refill() never raises; any failure fills the pool
from the static defaults instead.

Bonus content (browser-specific and visit-count-gated NPCs) is merged once
per session after the player profile is known. Merged actor types are never
removed.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from medieval_shop.models import PlayerProfile

logger = logging.getLogger(__name__)


class QuestionSource(Protocol):
    async def fetch_questions(self, count: int) -> list[str]: ...


class QuestionPool:
    """Owns the supply of NPC questions.

    Args:
        source:             Where fresh questions come from.
        default_questions:  Fallback question per actor type. Also defines
                            the base set of actor types.
        generic_question:   Fallback for actor types without a default.
        rng:                Random source (seeded in tests).
    """

    def __init__(
        self,
        source: QuestionSource,
        default_questions: Mapping[str, str],
        generic_question: str = "What counsel hast thou for a weary traveller?",
        rng: random.Random | None = None,
    ) -> None:
        self._source = source
        self._defaults: dict[str, str] = dict(default_questions)
        self._generic = generic_question
        self._rng = rng or random.Random()
        self._actor_types: list[str] = list(default_questions)
        self._questions: list[str] = []
        self._last_drawn: str | None = None
        self._refill_task: asyncio.Task | None = None
        self._bonus_merged = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def actor_types(self) -> list[str]:
        return list(self._actor_types)

    @property
    def questions(self) -> list[str]:
        return list(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def refilling(self) -> bool:
        return self._refill_task is not None and not self._refill_task.done()

    def default_for(self, actor_type: str) -> str:
        return self._defaults.get(actor_type) or self._generic

    # ------------------------------------------------------------------
    # Draw
    # ------------------------------------------------------------------

    def draw(self, actor_type: str) -> str:
        """Remove and return one question, never an empty string."""
        if self._questions:
            question = self._questions.pop(self._rng.randrange(len(self._questions)))
        else:
            logger.info("question pool empty, fetching new questions")
            self._schedule_refill()
            question = self.default_for(actor_type)
        self._last_drawn = question
        return question

    def _schedule_refill(self) -> None:
        if self.refilling:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no event loop running: refill skipped")
            return
        self._refill_task = loop.create_task(self.refill())

    # ------------------------------------------------------------------
    # Refill
    # ------------------------------------------------------------------

    def _static_questions(self) -> list[str]:
        return [q for q in dict.fromkeys(self._defaults.values()) if q != self._last_drawn]

    async def refill(self, n: int | None = None) -> None:
        """Replace the pool with fresh questions, or the defaults on failure."""
        n = n or 2 * len(self._actor_types)
        try:
            fetched = await self._source.fetch_questions(n)
            if not isinstance(fetched, list):
                raise TypeError(f"expected a list of questions, got {type(fetched).__name__}")
            questions = [
                q.strip() for q in fetched
                if isinstance(q, str) and q.strip() and q.strip() != self._last_drawn
            ]
            questions = list(dict.fromkeys(questions))
            if not questions:
                raise ValueError("no valid questions returned")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("error fetching questions, using defaults: %s", e)
            questions = self._static_questions()
        self._questions = questions
        logger.debug("question pool loaded with %d questions", len(questions))

    # ------------------------------------------------------------------
    # Conditional content
    # ------------------------------------------------------------------

    def _add_actor_type(self, actor_type: str, default_question: str | None = None) -> None:
        if default_question and actor_type not in self._defaults:
            self._defaults[actor_type] = default_question
        if actor_type not in self._actor_types:
            self._actor_types.append(actor_type)

    def merge_bonus(
        self,
        profile: PlayerProfile,
        browser_bonus: Mapping[str, Mapping[str, Any]],
        visit_tiers: Sequence[Mapping[str, Any]],
    ) -> list[str]:
        """Merge bonus NPCs for this player. Returns the actor types added.

        Runs once per session; later calls are no-ops.
        """
        if self._bonus_merged:
            return []
        self._bonus_merged = True
        before = set(self._actor_types)

        bonus = browser_bonus.get(profile.browser)
        if bonus:
            question = bonus["question"]
            if question not in self._questions:
                self._questions.insert(0, question)
            self._add_actor_type(bonus["actor_type"], question)
            logger.info("browser bonus %r merged for %s", bonus["actor_type"], profile.browser)

        for tier in visit_tiers:
            if profile.visit_count < tier["min_visits"]:
                continue
            questions = [q for q in tier.get("questions", []) if q not in self._questions]
            self._questions.extend(questions)
            self._add_actor_type(tier["actor_type"], questions[0] if questions else None)
            logger.info("visit tier %r merged at %d visits", tier["actor_type"], profile.visit_count)

        return [t for t in self._actor_types if t not in before]

    async def close(self) -> None:
        """Cancel an in-flight refill."""
        task, self._refill_task = self._refill_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
