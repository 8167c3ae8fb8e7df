"""Health check and game settings endpoints."""

from fastapi import APIRouter

from medieval_shop import storage

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get game settings (title tiers, questions, bonus NPCs, SMS texts)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update game settings (partial merge)."""
    return storage.update_config(body)
