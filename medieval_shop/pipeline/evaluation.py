"""Answer evaluation: score one (question, answer) pair and advance progression."""

import logging
from dataclasses import dataclass

from medieval_shop import storage
from medieval_shop.errors import InvalidInput, MalformedUpstreamOutput, UpstreamUnavailable
from medieval_shop.llm import LLM, LLMError
from medieval_shop.progression import extract_score, is_good_answer
from medieval_shop.prompts import PromptError, evaluation_prompt

from .notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    feedback: str
    status: str = "success"
    score: int = 0
    good: bool = False
    promoted_title: str | None = None

    def to_dict(self) -> dict:
        return {
            "feedback": self.feedback,
            "status": self.status,
            "score": self.score,
            "good": self.good,
            "promoted_title": self.promoted_title,
        }


async def evaluate(
    question: str,
    answer: str,
    visitor_id: str,
    llm: LLM,
    notifier: Notifier | None = None,
) -> EvaluationResult:
    """Score an answer and update the visitor's profile.

    Raises InvalidInput for empty fields (no remote call is made) and
    UpstreamUnavailable when the model cannot be reached (no counters move).
    Output without a score line is still returned as feedback, but counts
    for nothing.
    """
    question = (question or "").strip()
    answer = (answer or "").strip()
    if not question or not answer:
        raise InvalidInput("Both question and answer are required")

    try:
        prompt = evaluation_prompt(question, answer)
    except PromptError as e:
        raise UpstreamUnavailable(str(e)) from e

    try:
        feedback = await llm("evaluator", prompt)
    except LLMError as e:
        logger.error("evaluation failed for visitor %s: %s", visitor_id, e)
        raise UpstreamUnavailable(str(e)) from e

    feedback = feedback.strip()
    score = extract_score(feedback)
    if score is None:
        err = MalformedUpstreamOutput("No score line in evaluator output")
        logger.warning("%s: %r", err, feedback[:200])
        return EvaluationResult(feedback=feedback)

    threshold = storage.get_config()["good_answer_threshold"]
    profile, promoted = storage.record_answer(visitor_id, score, threshold=threshold)

    if promoted and notifier is not None:
        sent = await notifier.milestone(profile, promoted)
        logger.debug("milestone notice for %s sent=%s", visitor_id, sent)

    return EvaluationResult(
        feedback=feedback,
        score=score,
        good=is_good_answer(score, threshold),
        promoted_title=promoted,
    )
