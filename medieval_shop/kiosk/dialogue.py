"""Dialogue controller — the logic behind the question/answer panel.

Consumes bridge events to open and reset the DialogueSession, runs the
evaluation for a submitted answer, and hands the answer back to the NPC
lifecycle when the player presses Continue.

A second ShowDialogue while a session is open replaces it. Evaluation results
that arrive after the session was replaced or the panel unmounted are
discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Union

from medieval_shop.models import DialogueSession, Failed, Pending, Success

from .bridge import BridgeEvent, HideDialogue, SessionBridge, ShowDialogue
from .client import GENERIC_FAILURE

logger = logging.getLogger(__name__)

EvaluationOutcome = Union[Success, Failed]


class Evaluator(Protocol):
    async def evaluate(self, question: str, answer: str) -> EvaluationOutcome: ...


class DialogueController:
    def __init__(self, bridge: SessionBridge, evaluator: Evaluator) -> None:
        self._bridge = bridge
        self._evaluator = evaluator
        self._queue: asyncio.Queue[BridgeEvent] | None = None
        self._consumer: asyncio.Task | None = None
        self._generation = 0
        self._submitted: str | None = None
        self.session = DialogueSession()

    # ------------------------------------------------------------------
    # Mount / unmount
    # ------------------------------------------------------------------

    @property
    def mounted(self) -> bool:
        return self._queue is not None

    def mount(self) -> None:
        self._queue = self._bridge.attach()
        self._consumer = asyncio.get_running_loop().create_task(self._consume(self._queue))

    async def unmount(self) -> None:
        """Detach from the bridge. In-flight evaluations are not cancelled."""
        self._bridge.detach()
        self._queue = None
        self._reset()
        consumer, self._consumer = self._consumer, None
        if consumer is not None and not consumer.done():
            consumer.cancel()
            try:
                await consumer
            except asyncio.CancelledError:
                pass

    async def _consume(self, queue: asyncio.Queue[BridgeEvent]) -> None:
        while True:
            self.handle(await queue.get())

    def pump(self) -> int:
        """Handle every queued event now. Returns how many were handled."""
        handled = 0
        while self._queue is not None and not self._queue.empty():
            self.handle(self._queue.get_nowait())
            handled += 1
        return handled

    # ------------------------------------------------------------------
    # Bridge events
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._generation += 1
        self._submitted = None
        self.session = DialogueSession()

    def handle(self, event: BridgeEvent) -> None:
        if isinstance(event, ShowDialogue):
            if self.session.visible:
                logger.warning("dialogue already open: replacing it")
            self._reset()
            self.session = DialogueSession(
                visible=True, question=event.question, actor_type=event.actor_type
            )
        elif isinstance(event, HideDialogue):
            self._reset()

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    async def submit(self, answer: str) -> EvaluationOutcome | None:
        """Evaluate the player's answer for the open session.

        Returns the outcome, or None when it was discarded (no session, a
        submission already in progress, or the session went away meanwhile).
        """
        if not self.session.visible or isinstance(self.session.evaluation, Pending):
            return None
        answer = answer.strip()
        if not answer:
            self.session.evaluation = Failed(reason="Pray enter thy counsel first.")
            return self.session.evaluation

        generation = self._generation
        question = self.session.question
        self.session.answer_draft = answer
        self.session.evaluation = Pending()
        self._submitted = answer

        try:
            outcome = await self._evaluator.evaluate(question, answer)
        except Exception:
            logger.exception("evaluation failed")
            outcome = Failed(reason=GENERIC_FAILURE)

        if not self.mounted or generation != self._generation:
            logger.debug("evaluation result discarded: session closed")
            return None
        self.session.evaluation = outcome
        return outcome

    def dismiss(self) -> bool:
        """Continue: send the submitted answer to the waiting NPC.

        Only allowed once an evaluation has finished.
        """
        evaluation = self.session.evaluation
        if self._submitted is None or evaluation is None or isinstance(evaluation, Pending):
            return False
        return self._bridge.deliver_answer(self._submitted)
