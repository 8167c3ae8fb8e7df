"""Tests for the question pool: draw, refill and bonus content."""

import asyncio
import random

import pytest

from medieval_shop.kiosk import QuestionPool
from medieval_shop.models import PlayerProfile

DEFAULTS = {
    "king": "Wherefore doth mine royal email refuse to send?",
    "nun": "How doth one purify a virus-infected device?",
    "farmer": "Why doth mine tractor's computer refuse to start?",
}

BROWSER_BONUS = {
    "firefox": {"actor_type": "foxMage", "question": "Why doth mine fox devour memory?"},
}

VISIT_TIERS = [
    {"min_visits": 3, "actor_type": "bard", "questions": ["Bard one?", "Bard two?"]},
    {"min_visits": 7, "actor_type": "alchemist", "questions": ["Elixir?"]},
]


class StubSource:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result if result is not None else []
        self.error = error
        self.calls: list[int] = []
        self.gate: asyncio.Event | None = None

    async def fetch_questions(self, count: int):
        self.calls.append(count)
        if self.gate is not None:
            await self.gate.wait()
        if self.error:
            raise self.error
        return self.result


def _pool(source: StubSource) -> QuestionPool:
    return QuestionPool(source, DEFAULTS, "Generic question?", rng=random.Random(7))


def _profile(browser: str = "unknown", visits: int = 1) -> PlayerProfile:
    profile = PlayerProfile(visitor_id="v", current_title="Humble Shopkeeper", visit_count=visits)
    profile.browser = browser
    return profile


# ── refill ──────────────────────────────────────────────


async def test_refill_requests_twice_the_actor_types():
    source = StubSource(["A?", "B?"])
    pool = _pool(source)
    await pool.refill()
    assert source.calls == [6]
    assert sorted(pool.questions) == ["A?", "B?"]


async def test_refill_deduplicates_and_drops_blanks():
    pool = _pool(StubSource(["A?", " A? ", "", "B?", 3]))
    await pool.refill()
    assert sorted(pool.questions) == ["A?", "B?"]


@pytest.mark.parametrize(
    "source",
    [
        StubSource(error=ConnectionError("offline")),
        StubSource({"questions": "not a list"}),
        StubSource(["", "   "]),
    ],
)
async def test_refill_failure_uses_defaults(source):
    pool = _pool(source)
    await pool.refill()
    assert sorted(pool.questions) == sorted(DEFAULTS.values())


async def test_refill_does_not_reserve_last_drawn_question():
    pool = _pool(StubSource(error=ConnectionError("offline")))
    drawn = pool.draw("king")
    await pool.refill()
    assert drawn not in pool.questions
    await pool.close()


# ── draw ────────────────────────────────────────────────


async def test_draw_removes_question():
    pool = _pool(StubSource(["A?", "B?", "C?"]))
    await pool.refill()
    drawn = {pool.draw("king") for _ in range(3)}
    assert drawn == {"A?", "B?", "C?"}
    assert len(pool) == 0


async def test_empty_pool_returns_default_and_refills_once():
    source = StubSource(["Fresh?"])
    source.gate = asyncio.Event()
    pool = _pool(source)

    assert pool.draw("nun") == DEFAULTS["nun"]
    assert pool.draw("unknown-type") == "Generic question?"
    assert pool.refilling
    await asyncio.sleep(0)
    assert len(source.calls) == 1

    source.gate.set()
    await asyncio.sleep(0.01)
    assert not pool.refilling
    assert pool.questions == ["Fresh?"]


async def test_draw_never_empty():
    pool = _pool(StubSource(error=ConnectionError("offline")))
    for actor_type in ["king", "nun", "farmer", "other"] * 5:
        assert pool.draw(actor_type)
        await asyncio.sleep(0)
    await pool.close()


async def test_close_cancels_refill():
    source = StubSource(["A?"])
    source.gate = asyncio.Event()
    pool = _pool(source)
    pool.draw("king")
    await pool.close()
    assert not pool.refilling


# ── merge_bonus ─────────────────────────────────────────


async def test_browser_bonus_goes_first():
    pool = _pool(StubSource(["A?"]))
    await pool.refill()
    added = pool.merge_bonus(_profile("firefox"), BROWSER_BONUS, VISIT_TIERS)
    assert added == ["foxMage"]
    assert pool.questions[0] == "Why doth mine fox devour memory?"
    assert pool.default_for("foxMage") == "Why doth mine fox devour memory?"


async def test_browser_bonus_already_in_pool_is_not_duplicated():
    bonus_question = BROWSER_BONUS["firefox"]["question"]
    pool = _pool(StubSource(["A?", bonus_question]))
    await pool.refill()
    pool.merge_bonus(_profile("firefox"), BROWSER_BONUS, VISIT_TIERS)
    assert pool.questions.count(bonus_question) == 1
    assert len(pool.questions) == 2


async def test_visit_tiers_unlock_by_count():
    pool = _pool(StubSource(["A?"]))
    await pool.refill()
    added = pool.merge_bonus(_profile(visits=3), BROWSER_BONUS, VISIT_TIERS)
    assert added == ["bard"]
    assert "Bard one?" in pool.questions and "Bard two?" in pool.questions
    assert "Elixir?" not in pool.questions


async def test_merge_is_idempotent_and_keeps_types():
    pool = _pool(StubSource(["A?"]))
    profile = _profile("firefox", visits=8)
    first = pool.merge_bonus(profile, BROWSER_BONUS, VISIT_TIERS)
    assert first == ["foxMage", "bard", "alchemist"]
    assert pool.merge_bonus(profile, BROWSER_BONUS, VISIT_TIERS) == []
    assert pool.actor_types == ["king", "nun", "farmer", "foxMage", "bard", "alchemist"]


async def test_unknown_browser_gets_no_bonus():
    pool = _pool(StubSource(["A?"]))
    assert pool.merge_bonus(_profile("unknown"), BROWSER_BONUS, VISIT_TIERS) == []
    assert pool.actor_types == ["king", "nun", "farmer"]
