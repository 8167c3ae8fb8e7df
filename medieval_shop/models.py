"""Core domain models.

Pipeline stages, storage functions and the kiosk core operate on these types.
Pydantic is used for validation and serialisation at every data boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class ActorPhase(str, Enum):
    """Lifecycle phase of the NPC currently on stage."""

    SPAWNING = "spawning"
    APPROACHING = "approaching"
    AWAITING_ANSWER = "awaiting_answer"
    DEPARTING = "departing"
    DESPAWNED = "despawned"


class Actor(BaseModel):
    """The one NPC alive at a time."""

    actor_type: str
    phase: ActorPhase = ActorPhase.SPAWNING
    assigned_question: str = ""
    assigned_answer: str | None = None


# ---------------------------------------------------------------------------
# Evaluation: tagged variant shown in the dialogue session
# ---------------------------------------------------------------------------

class Pending(BaseModel):
    kind: Literal["pending"] = "pending"


class Success(BaseModel):
    kind: Literal["success"] = "success"
    feedback_text: str
    score: int = 0
    reaction: str | None = None


class Failed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str


Evaluation = Annotated[Union[Pending, Success, Failed], Field(discriminator="kind")]


class DialogueSession(BaseModel):
    """State of the dialogue panel. Reset to hidden on hide."""

    visible: bool = False
    question: str = ""
    actor_type: str = ""
    answer_draft: str = ""
    evaluation: Evaluation | None = None


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------

class TitleTier(BaseModel):
    min_good_answers: int
    title: str


class PlayerProfile(BaseModel):
    """Per-visitor progression document.

    `browser` is derived from the request on every lookup and never stored.
    """

    visitor_id: str
    visit_count: int = 0
    answer_count: int = 0
    good_answer_count: int = 0
    current_title: str
    unlocked_titles: list[str] = Field(default_factory=list)
    last_visit: str = Field(default_factory=utcnow)
    created_at: str = Field(default_factory=utcnow)
    phone_number: str | None = None
    browser: str = Field(default="unknown", exclude=True)

    def public(self) -> dict:
        """JSON shape returned by the profile endpoint (includes `browser`)."""
        data = self.model_dump()
        data["browser"] = self.browser
        return data
