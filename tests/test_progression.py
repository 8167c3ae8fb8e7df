"""Tests for score extraction and title promotion rules."""

from medieval_shop.models import PlayerProfile, TitleTier
from medieval_shop.progression import (
    apply_score,
    extract_score,
    is_good_answer,
    next_title,
    session_summary,
    villager_reaction,
)

TIERS = [
    TitleTier(min_good_answers=10, title="Village Sage"),
    TitleTier(min_good_answers=25, title="Royal Counselor"),
]


def _profile(good: int = 0, answers: int | None = None, title: str = "Humble Shopkeeper",
             unlocked: list[str] | None = None) -> PlayerProfile:
    return PlayerProfile(
        visitor_id="v1",
        answer_count=answers if answers is not None else good,
        good_answer_count=good,
        current_title=title,
        unlocked_titles=unlocked or [title],
    )


# ── extract_score ───────────────────────────────────────


def test_extract_score_from_labelled_output():
    text = "Score: 80\nFeedback: Thy counsel is sound.\nSuggestion: Mention the cable."
    assert extract_score(text) == 80


def test_extract_score_case_insensitive_and_spaced():
    assert extract_score("score:   7") == 7


def test_extract_score_missing():
    assert extract_score("Feedback: no number here") is None
    assert extract_score("") is None


def test_extract_score_clamped():
    assert extract_score("Score: 250") == 100


def test_good_answer_threshold():
    assert is_good_answer(65)
    assert not is_good_answer(64)


# ── apply_score ─────────────────────────────────────────


def test_good_score_increments_both_counters():
    updated, promoted = apply_score(_profile(good=2, answers=3), 80, TIERS)
    assert updated.answer_count == 4
    assert updated.good_answer_count == 3
    assert promoted is None


def test_poor_score_increments_answers_only():
    updated, _ = apply_score(_profile(good=2, answers=3), 40, TIERS)
    assert updated.answer_count == 4
    assert updated.good_answer_count == 2


def test_apply_score_does_not_mutate_input():
    original = _profile(good=1)
    apply_score(original, 90, TIERS)
    assert original.good_answer_count == 1


def test_crossing_first_tier_promotes():
    updated, promoted = apply_score(_profile(good=9), 90, TIERS)
    assert promoted == "Village Sage"
    assert updated.current_title == "Village Sage"
    assert updated.unlocked_titles == ["Humble Shopkeeper", "Village Sage"]


def test_crossing_second_tier_promotes():
    p = _profile(good=24, title="Village Sage", unlocked=["Humble Shopkeeper", "Village Sage"])
    updated, promoted = apply_score(p, 90, TIERS)
    assert promoted == "Royal Counselor"
    assert updated.unlocked_titles == ["Humble Shopkeeper", "Village Sage", "Royal Counselor"]


def test_satisfying_both_tiers_awards_only_the_higher():
    # A profile that somehow missed the lower promotion jumps straight up.
    updated, promoted = apply_score(_profile(good=24), 90, TIERS)
    assert promoted == "Royal Counselor"
    assert updated.unlocked_titles == ["Humble Shopkeeper", "Royal Counselor"]


def test_lower_tier_not_reapplied_after_higher():
    p = _profile(good=30, title="Royal Counselor", unlocked=["Humble Shopkeeper", "Royal Counselor"])
    updated, promoted = apply_score(p, 90, TIERS)
    assert promoted is None
    assert updated.current_title == "Royal Counselor"
    assert "Village Sage" not in updated.unlocked_titles


def test_no_promotion_between_tiers():
    p = _profile(good=12, title="Village Sage", unlocked=["Humble Shopkeeper", "Village Sage"])
    _, promoted = apply_score(p, 90, TIERS)
    assert promoted is None


def test_title_never_regresses_over_many_updates():
    profile = _profile()
    ranks = {"Humble Shopkeeper": 0, "Village Sage": 1, "Royal Counselor": 2}
    seen = [ranks[profile.current_title]]
    for i in range(60):
        profile, _ = apply_score(profile, 90 if i % 3 else 20, TIERS)
        assert profile.good_answer_count <= profile.answer_count
        seen.append(ranks[profile.current_title])
    assert seen == sorted(seen)
    assert profile.current_title == "Royal Counselor"


def test_next_title_unsorted_table():
    reversed_tiers = list(reversed(TIERS))
    assert next_title(reversed_tiers, 10, ["Humble Shopkeeper"], "Humble Shopkeeper") == "Village Sage"


# ── flavour text ────────────────────────────────────────


def test_villager_reaction_bands():
    assert "shine" in villager_reaction(75)
    assert "measured" in villager_reaction(50)
    assert "darkens" in villager_reaction(49)


def test_session_summary():
    assert "blank" in session_summary(_profile(good=0, answers=0))
    text = session_summary(_profile(good=3, answers=4))
    assert "4 villagers" in text
    assert "75%" in text
