"""Answer evaluation endpoint."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse

from medieval_shop.errors import InvalidInput, UpstreamUnavailable
from medieval_shop.llm import LLM
from medieval_shop.pipeline import Notifier, evaluate

from .deps import get_llm, get_notifier
from .models import EvaluateBody

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/evaluate")
async def evaluate_answer(
    body: EvaluateBody,
    x_visitor_id: str = Header(default="anonymous"),
    llm: LLM = Depends(get_llm),
    notifier: Notifier = Depends(get_notifier),
):
    """Score an answer with the LLM and advance the visitor's progression."""
    try:
        result = await evaluate(body.question, body.answer, x_visitor_id, llm, notifier)
    except InvalidInput as e:
        raise HTTPException(400, str(e))
    except UpstreamUnavailable as e:
        logger.error("evaluate upstream failure: %s", e)
        return JSONResponse(
            status_code=502,
            content={
                "error": "upstream_unavailable",
                "message": UpstreamUnavailable.user_message,
                "status": "error",
            },
        )
    return result.to_dict()
