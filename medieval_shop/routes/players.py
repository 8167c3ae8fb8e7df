"""Player profile lookup (counts a visit)."""

from fastapi import APIRouter, Header, HTTPException

from medieval_shop import storage
from medieval_shop.errors import UpstreamUnavailable

router = APIRouter()


@router.get("/player/{visitor_id}")
async def get_player(visitor_id: str, user_agent: str | None = Header(default=None)):
    """Get (or create) a player profile, with the caller's browser classification."""
    if not visitor_id.strip():
        raise HTTPException(400, "visitor id is required")
    try:
        profile = storage.get_or_create_profile(visitor_id, user_agent)
    except UpstreamUnavailable:
        raise HTTPException(502, UpstreamUnavailable.user_message)
    return profile.public()
