"""Server-side pipelines that talk to the text-generation service.

  evaluation     — score one answer, update counters, promote titles,
                   send a milestone SMS on promotion.
  questions      — generate a batch of NPC questions, falling back to the
                   static defaults so the caller always gets a usable list.
  notifications  — milestone/hint SMS and inbound SMS commands
                   (WISDOM, SCROLL, help).

Evaluator output format (only the score line is parsed):
  Score: 80
  Feedback: Thy counsel is sound.
  Suggestion: Mention the restart.
"""

from .evaluation import EvaluationResult, evaluate  # noqa: F401
from .notifications import Notifier, handle_inbound  # noqa: F401
from .questions import generate_questions, parse_questions  # noqa: F401
