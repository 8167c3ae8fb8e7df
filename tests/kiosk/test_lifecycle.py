"""Tests for the NPC lifecycle state machine (zero timings, headless stage)."""

import asyncio
import random

from medieval_shop.kiosk import (
    HeadlessStage,
    HideDialogue,
    NpcLifecycle,
    QuestionPool,
    SessionBridge,
    ShowDialogue,
    Timings,
)
from medieval_shop.models import ActorPhase

DEFAULTS = {
    "king": "Wherefore doth mine royal email refuse to send?",
    "nun": "How doth one purify a virus-infected device?",
    "farmer": "Why doth mine tractor's computer refuse to start?",
    "blacksmith": "How shall I forge a stronger password?",
}

FAST = Timings(fade_in=0, approach=0, depart=0, respawn_delay=0, retry_backoff=0)


class StubSource:
    async def fetch_questions(self, count: int) -> list[str]:
        return [f"Question {i}?" for i in range(count)]


def _lifecycle(stage=None, seed: int = 1) -> tuple[NpcLifecycle, SessionBridge]:
    bridge = SessionBridge()
    pool = QuestionPool(StubSource(), DEFAULTS, rng=random.Random(seed))
    lifecycle = NpcLifecycle(
        stage or HeadlessStage(), pool, bridge, timings=FAST, rng=random.Random(seed)
    )
    return lifecycle, bridge


def _auto_answer(lifecycle: NpcLifecycle, bridge: SessionBridge, answer: str = "Restart it.") -> None:
    def listener(actor):
        if actor.phase is ActorPhase.AWAITING_ANSWER:
            bridge.deliver_answer(answer)

    lifecycle.on_phase(listener)


async def test_cycle_walks_through_every_phase_in_order():
    lifecycle, bridge = _lifecycle()
    phases = []
    lifecycle.on_phase(lambda actor: phases.append(actor.phase))
    _auto_answer(lifecycle, bridge)

    actor = await lifecycle.run_cycle()

    assert phases == [
        ActorPhase.SPAWNING,
        ActorPhase.APPROACHING,
        ActorPhase.AWAITING_ANSWER,
        ActorPhase.DEPARTING,
        ActorPhase.DESPAWNED,
    ]
    assert actor.assigned_question
    assert actor.assigned_answer == "Restart it."
    assert lifecycle.actor is None


async def test_no_immediate_repeat_over_many_spawns():
    lifecycle, bridge = _lifecycle(seed=42)
    _auto_answer(lifecycle, bridge)
    await lifecycle.run(cycles=100)
    history = lifecycle.history
    assert len(history) == 100
    assert all(a != b for a, b in zip(history, history[1:]))
    assert set(history) == set(DEFAULTS)
    await lifecycle._pool.close()


async def test_single_type_may_repeat():
    lifecycle, bridge = _lifecycle(HeadlessStage(available={"nun"}))
    lifecycle.start()
    await lifecycle.stop()
    assert lifecycle.loaded_types == ["nun"]
    _auto_answer(lifecycle, bridge)
    await lifecycle.run(cycles=3)
    assert lifecycle.history == ["nun", "nun", "nun"]


async def test_missing_assets_retry_with_another_type():
    lifecycle, bridge = _lifecycle(HeadlessStage(available={"farmer"}))
    _auto_answer(lifecycle, bridge)
    actor = await lifecycle.run_cycle()
    assert actor.actor_type == "farmer"
    assert lifecycle.history == ["farmer"]


class FlakyStage(HeadlessStage):
    """Reports assets missing for the first `failures` checks."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.checks = 0

    def has_assets(self, actor_type: str) -> bool:
        self.checks += 1
        return self.checks > self.failures


async def test_assets_that_load_late_are_picked_up():
    stage = FlakyStage(failures=len(DEFAULTS) + 2)
    lifecycle, bridge = _lifecycle(stage)
    _auto_answer(lifecycle, bridge)
    actor = await lifecycle.run_cycle()
    assert actor.phase is ActorPhase.DESPAWNED
    assert lifecycle.history == [actor.actor_type]
    assert stage.checks == len(DEFAULTS) + 3


async def test_no_assets_keeps_retrying_until_stopped():
    lifecycle, _ = _lifecycle(HeadlessStage(available=set()))
    lifecycle.start()
    for _ in range(50):
        await asyncio.sleep(0)
    assert lifecycle.running
    assert lifecycle.history == []
    await lifecycle.stop()
    assert not lifecycle.running


async def test_dialogue_opened_with_assigned_question_then_closed():
    lifecycle, bridge = _lifecycle()
    queue = bridge.attach()
    _auto_answer(lifecycle, bridge)

    actor = await lifecycle.run_cycle()

    show = queue.get_nowait()
    assert show == ShowDialogue(actor.assigned_question, actor.actor_type)
    assert queue.get_nowait() == HideDialogue()
    assert queue.empty()


async def test_waits_for_answer_without_timeout():
    lifecycle, bridge = _lifecycle()
    lifecycle.start()
    for _ in range(20):
        await asyncio.sleep(0)
    assert lifecycle.actor is not None
    assert lifecycle.actor.phase is ActorPhase.AWAITING_ANSWER
    assert bridge.awaiting_answer

    bridge.deliver_answer("Turn it off and on.")
    for _ in range(20):
        await asyncio.sleep(0)
    assert len(lifecycle.history) >= 2
    await lifecycle.stop()


async def test_stop_cancels_and_removes_actor():
    lifecycle, bridge = _lifecycle()
    lifecycle.start()
    for _ in range(20):
        await asyncio.sleep(0)
    assert lifecycle.running

    await lifecycle.stop()

    assert not lifecycle.running
    assert lifecycle.actor is None
    assert not bridge.awaiting_answer
    assert bridge.deliver_answer("too late") is False
