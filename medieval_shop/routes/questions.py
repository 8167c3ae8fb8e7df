"""Question generation endpoint."""

from fastapi import APIRouter, Depends

from medieval_shop.llm import LLM
from medieval_shop.pipeline import generate_questions

from .deps import get_llm

router = APIRouter()


@router.get("/generate-questions")
async def get_questions(count: int = 22, llm: LLM = Depends(get_llm)):
    """Generate NPC questions. Always returns a usable list."""
    return await generate_questions(count, llm)
