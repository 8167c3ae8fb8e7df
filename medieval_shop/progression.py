"""Scoring and title progression rules.

Everything here is pure: no storage, no I/O. storage.record_answer loads a
profile, calls apply_score and persists the result in one write.

Title tiers are evaluated from the highest threshold down. Only the first
satisfied tier is considered on a given update, so a player who crosses two
thresholds at once is awarded the higher title only, and a lower tier is never
re-applied once a higher one is held.
"""

import logging
import re
from collections.abc import Sequence

from .models import PlayerProfile, TitleTier

logger = logging.getLogger(__name__)

GOOD_ANSWER_THRESHOLD = 65

_SCORE_RE = re.compile(r"Score:\s*(\d+)", re.IGNORECASE)


def extract_score(text: str) -> int | None:
    """Pull the numeric score out of evaluator output, or None if absent.

    "Score: 80\\nFeedback: ..." → 80. Values above 100 are clamped.
    """
    match = _SCORE_RE.search(text or "")
    if not match:
        return None
    return min(int(match.group(1)), 100)


def is_good_answer(score: int, threshold: int = GOOD_ANSWER_THRESHOLD) -> bool:
    return score >= threshold


def _sorted_desc(tiers: Sequence[TitleTier]) -> list[TitleTier]:
    return sorted(tiers, key=lambda t: t.min_good_answers, reverse=True)


def tier_rank(tiers: Sequence[TitleTier], title: str) -> int:
    """Position of `title` in ascending threshold order; -1 for the base title."""
    ascending = sorted(tiers, key=lambda t: t.min_good_answers)
    for i, tier in enumerate(ascending):
        if tier.title == title:
            return i
    return -1


def next_title(
    tiers: Sequence[TitleTier],
    good_answer_count: int,
    unlocked: Sequence[str],
    current_title: str,
) -> str | None:
    """Return the title to promote to, or None.

    The highest satisfied tier is the only candidate. It wins when it is not
    yet unlocked and ranks strictly above the current title.
    """
    current_rank = tier_rank(tiers, current_title)
    for tier in _sorted_desc(tiers):
        if good_answer_count < tier.min_good_answers:
            continue
        if tier.title in unlocked:
            return None
        if tier_rank(tiers, tier.title) <= current_rank:
            return None
        return tier.title
    return None


def apply_score(
    profile: PlayerProfile,
    score: int,
    tiers: Sequence[TitleTier],
    threshold: int = GOOD_ANSWER_THRESHOLD,
) -> tuple[PlayerProfile, str | None]:
    """Count one scored answer. Returns (updated copy, promoted title or None)."""
    updated = profile.model_copy(deep=True)
    updated.answer_count += 1
    if is_good_answer(score, threshold):
        updated.good_answer_count += 1

    promoted = next_title(
        tiers, updated.good_answer_count, updated.unlocked_titles, updated.current_title
    )
    if promoted:
        updated.unlocked_titles.append(promoted)
        updated.current_title = promoted
        logger.info("visitor %s promoted to %r", updated.visitor_id, promoted)
    return updated, promoted


def villager_reaction(score: int) -> str:
    if score >= 75:
        return "Verily, the villager's face doth shine with the radiance of thy wise counsel!"
    if score >= 50:
        return "The villager pondereth thy words with measured contemplation."
    return "Alas, the villager's countenance darkens at thy questionable wisdom."


def session_summary(profile: PlayerProfile) -> str:
    """Short progress text for the SCROLL command."""
    if profile.answer_count == 0:
        return (
            f"Hail, {profile.current_title}! Thy scroll is yet blank. "
            "Return to the shop and counsel the villagers."
        )
    pct = round(100 * profile.good_answer_count / profile.answer_count)
    return (
        f"Hail, {profile.current_title}! Of {profile.answer_count} villagers "
        f"counselled, {profile.good_answer_count} left well pleased ({pct}%)."
    )
