"""Kiosk orchestration core.

  bridge     — SessionBridge: event queue to the dialogue, single-slot answer future.
  pool       — QuestionPool: random draw, background refill, bonus NPC merge.
  lifecycle  — NpcLifecycle: spawn → approach → await answer → depart → despawn.
  dialogue   — DialogueController: session state and answer evaluation.
  stage      — Stage protocol for the rendering engine, plus HeadlessStage.
  client     — KioskClient: httpx calls to the API.
  runner     — Kiosk: wires the above together.
"""

from .bridge import HideDialogue, SessionBridge, ShowDialogue  # noqa: F401
from .client import KioskClient  # noqa: F401
from .dialogue import DialogueController  # noqa: F401
from .lifecycle import NpcLifecycle, Timings  # noqa: F401
from .pool import QuestionPool  # noqa: F401
from .runner import Kiosk  # noqa: F401
from .stage import HeadlessStage, Stage  # noqa: F401
