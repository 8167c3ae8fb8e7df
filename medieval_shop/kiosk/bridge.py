"""Session bridge — the only link between the NPC lifecycle and the dialogue UI.

The two sides run as separate tasks on one event loop and never call into
each other. The lifecycle pushes ShowDialogue / HideDialogue events onto the
UI's queue and waits on a single-slot answer future; the UI consumes events
and delivers the player's answer back through deliver_answer().

Contract:
  - show()/hide() while no UI is attached are ignored.
  - At most one answer handler is installed. Installing another cancels and
    replaces the previous one.
  - The handler fires once; later deliveries are ignored.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowDialogue:
    question: str
    actor_type: str


@dataclass(frozen=True)
class HideDialogue:
    pass


BridgeEvent = Union[ShowDialogue, HideDialogue]


class SessionBridge:
    def __init__(self) -> None:
        self._queue: asyncio.Queue[BridgeEvent] | None = None
        self._pending: asyncio.Future[str] | None = None
        self._open = False

    # ------------------------------------------------------------------
    # UI mount / unmount
    # ------------------------------------------------------------------

    def attach(self) -> asyncio.Queue[BridgeEvent]:
        """Attach a UI and return the queue it should consume."""
        self._queue = asyncio.Queue()
        return self._queue

    def detach(self) -> None:
        self._queue = None
        self._open = False

    @property
    def attached(self) -> bool:
        return self._queue is not None

    @property
    def is_open(self) -> bool:
        """True between a delivered show and its matching hide."""
        return self._open

    # ------------------------------------------------------------------
    # Lifecycle → UI
    # ------------------------------------------------------------------

    def show(self, question: str, actor_type: str) -> bool:
        if self._queue is None:
            logger.debug("show ignored: no dialogue attached")
            return False
        self._queue.put_nowait(ShowDialogue(question, actor_type))
        self._open = True
        return True

    def hide(self) -> bool:
        if self._queue is None:
            logger.debug("hide ignored: no dialogue attached")
            return False
        self._queue.put_nowait(HideDialogue())
        self._open = False
        return True

    # ------------------------------------------------------------------
    # UI → Lifecycle
    # ------------------------------------------------------------------

    def expect_answer(self) -> asyncio.Future[str]:
        """Install the answer handler and return the future it resolves."""
        if self._pending is not None and not self._pending.done():
            logger.warning("replacing an answer handler that never fired")
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_future()
        return self._pending

    @property
    def awaiting_answer(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def deliver_answer(self, answer: str) -> bool:
        """Hand the player's answer to the waiting lifecycle.

        Returns False (and does nothing) when no handler is installed.
        """
        pending, self._pending = self._pending, None
        if pending is None or pending.done():
            logger.debug("answer ignored: no handler installed")
            return False
        pending.set_result(answer)
        return True

    def clear_handler(self) -> None:
        """Drop any installed handler (teardown)."""
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
