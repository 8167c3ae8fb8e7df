"""Question generation for the NPC question pool.

Always returns a usable list: status is "success" when the model supplied
enough questions, "partial" when it supplied some (topped up from the
defaults), and "fallback" when it supplied none or could not be reached.
"""

import logging
import random
import re

from medieval_shop import storage
from medieval_shop.errors import MalformedUpstreamOutput
from medieval_shop.llm import LLM, LLMError
from medieval_shop.prompts import PromptError, question_prompt

logger = logging.getLogger(__name__)

MIN_COUNT = 1
MAX_COUNT = 50

_BULLET_RE = re.compile(r"^\s*(?:[-*•]+|\d+[.):]|Q\d*[.:])\s*", re.IGNORECASE)


def clamp_count(count: int) -> int:
    return max(MIN_COUNT, min(MAX_COUNT, count))


def parse_questions(text: str) -> list[str]:
    """Split model output into distinct questions.

    Strips bullets, numbering and surrounding quotes; drops blank lines,
    duplicates and lines that are not questions.
    """
    seen: set[str] = set()
    questions: list[str] = []
    for line in (text or "").splitlines():
        cleaned = _BULLET_RE.sub("", line).strip().strip('"“”').strip()
        if not cleaned or "?" not in cleaned:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        questions.append(cleaned)
    return questions


def default_questions() -> list[str]:
    config = storage.get_config()
    return list(dict.fromkeys(config["default_questions"].values()))


def _fallback(count: int) -> list[str]:
    defaults = default_questions()
    random.shuffle(defaults)
    return defaults[:count] if count <= len(defaults) else defaults


async def generate_questions(count: int, llm: LLM) -> dict:
    """Return {"questions": [...], "status": "success"|"partial"|"fallback"}."""
    count = clamp_count(count)
    try:
        text = await llm("question_generator", question_prompt(count))
    except (LLMError, PromptError) as e:
        logger.warning("question generation failed, using defaults: %s", e)
        return {"questions": _fallback(count), "status": "fallback"}

    questions = parse_questions(text)
    if not questions:
        err = MalformedUpstreamOutput("No questions found in generator output")
        logger.warning("%s: %r", err, text[:200])
        return {"questions": _fallback(count), "status": "fallback"}

    if len(questions) >= count:
        return {"questions": questions[:count], "status": "success"}

    supplied = len(questions)
    seen = {q.lower() for q in questions}
    for q in _fallback(MAX_COUNT):
        if len(questions) >= count:
            break
        if q.lower() not in seen:
            questions.append(q)
            seen.add(q.lower())
    logger.info("question generator returned %d of %d; topped up", supplied, count)
    return {"questions": questions, "status": "partial"}
