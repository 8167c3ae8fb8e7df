"""FastAPI API endpoints under /api.

Endpoint groups: player profile, answer evaluation, question generation,
hint requests + inbound SMS webhook, health and settings.
"""

from fastapi import APIRouter

from .evaluate import router as evaluate_router
from .players import router as players_router
from .questions import router as questions_router
from .settings import router as settings_router
from .sms import router as sms_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(players_router)
router.include_router(evaluate_router)
router.include_router(questions_router)
router.include_router(sms_router)
