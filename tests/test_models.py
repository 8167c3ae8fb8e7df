"""Tests for medieval_shop.models."""

import pytest
from pydantic import BaseModel, ValidationError

from medieval_shop.models import (
    Actor,
    ActorPhase,
    DialogueSession,
    Evaluation,
    Failed,
    Pending,
    PlayerProfile,
    Success,
)


class _Holder(BaseModel):
    evaluation: Evaluation


class TestActor:
    def test_defaults(self) -> None:
        a = Actor(actor_type="king")
        assert a.phase is ActorPhase.SPAWNING
        assert a.assigned_question == ""
        assert a.assigned_answer is None


class TestEvaluation:
    def test_discriminated_on_kind(self) -> None:
        assert isinstance(_Holder.model_validate({"evaluation": {"kind": "pending"}}).evaluation, Pending)
        ok = _Holder.model_validate(
            {"evaluation": {"kind": "success", "feedback_text": "Good.", "score": 70}}
        ).evaluation
        assert isinstance(ok, Success) and ok.score == 70
        bad = _Holder.model_validate({"evaluation": {"kind": "failed", "reason": "x"}}).evaluation
        assert isinstance(bad, Failed)

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _Holder.model_validate({"evaluation": {"kind": "maybe"}})


class TestDialogueSession:
    def test_hidden_by_default(self) -> None:
        s = DialogueSession()
        assert s.visible is False
        assert s.evaluation is None


class TestPlayerProfile:
    def test_browser_not_persisted(self) -> None:
        p = PlayerProfile(visitor_id="v", current_title="Humble Shopkeeper")
        p.browser = "firefox"
        assert "browser" not in p.model_dump()
        assert "browser" not in p.model_dump_json()
        assert p.public()["browser"] == "firefox"

    def test_counters_default_to_zero(self) -> None:
        p = PlayerProfile(visitor_id="v", current_title="t")
        assert (p.visit_count, p.answer_count, p.good_answer_count) == (0, 0, 0)
        assert p.phone_number is None
