"""Player profile documents, one JSON file per visitor.

Profiles are never deleted. Counters only move forward; see
progression.apply_score for the promotion rules.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from medieval_shop.clients import classify_browser
from medieval_shop.errors import UpstreamUnavailable
from medieval_shop.models import PlayerProfile, TitleTier, utcnow
from medieval_shop.progression import apply_score

from .config import get_config
from .core import players_dir, safe_id

logger = logging.getLogger(__name__)


def _profile_path(visitor_id: str) -> Path:
    return players_dir() / f"{safe_id(visitor_id)}.json"


def title_tiers(config: dict | None = None) -> list[TitleTier]:
    config = config or get_config()
    return [TitleTier.model_validate(t) for t in config["title_tiers"]]


def get_profile(visitor_id: str) -> PlayerProfile | None:
    """Load a profile. Returns None if the visitor has never been seen."""
    path = _profile_path(visitor_id)
    if not path.is_file():
        return None
    try:
        return PlayerProfile.model_validate_json(path.read_text())
    except (OSError, ValidationError) as e:
        raise UpstreamUnavailable(f"Cannot read profile {visitor_id!r}: {e}") from e


def save_profile(profile: PlayerProfile) -> None:
    try:
        _profile_path(profile.visitor_id).write_text(profile.model_dump_json(indent=2))
    except OSError as e:
        raise UpstreamUnavailable(f"Cannot write profile {profile.visitor_id!r}: {e}") from e


def _new_profile(visitor_id: str) -> PlayerProfile:
    base = get_config()["base_title"]
    return PlayerProfile(
        visitor_id=visitor_id,
        current_title=base,
        unlocked_titles=[base],
    )


def get_or_create_profile(visitor_id: str, client_signature: str | None = None) -> PlayerProfile:
    """Look up a profile, counting this as a visit.

    First sight creates zeroed counters and the base title. The returned
    profile carries a `browser` classification derived from the signature.
    """
    profile = get_profile(visitor_id)
    if profile is None:
        profile = _new_profile(visitor_id)
        profile.visit_count = 1
        logger.info("new visitor %s", visitor_id)
    else:
        profile.visit_count += 1
        profile.last_visit = utcnow()
    save_profile(profile)
    profile.browser = classify_browser(client_signature)
    return profile


def record_answer(
    visitor_id: str,
    score: int,
    tiers: list[TitleTier] | None = None,
    threshold: int | None = None,
) -> tuple[PlayerProfile, str | None]:
    """Count one scored answer and persist. Returns (profile, promoted title)."""
    config = get_config()
    tiers = tiers if tiers is not None else title_tiers(config)
    threshold = threshold if threshold is not None else config["good_answer_threshold"]

    profile = get_profile(visitor_id) or _new_profile(visitor_id)
    updated, promoted = apply_score(profile, score, tiers, threshold)
    save_profile(updated)
    return updated, promoted


def register_phone(visitor_id: str, phone_number: str) -> PlayerProfile:
    """Attach a phone number for milestone and hint messages."""
    profile = get_profile(visitor_id) or _new_profile(visitor_id)
    profile.phone_number = phone_number.strip()
    save_profile(profile)
    return profile


def find_profile_by_phone(phone_number: str) -> PlayerProfile | None:
    wanted = phone_number.strip()
    if not wanted:
        return None
    for path in sorted(players_dir().glob("*.json")):
        try:
            profile = PlayerProfile.model_validate_json(path.read_text())
        except (OSError, ValidationError) as e:
            logger.warning("skipping unreadable profile %s: %s", path.name, e)
            continue
        if profile.phone_number == wanted:
            return profile
    return None
