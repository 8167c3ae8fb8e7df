"""Handlebars prompt rendering for the text-generation service.

The evaluation prompt is a fixed contract with the model: it must answer in
three labelled lines (Score / Feedback / Suggestion). Only the score line is
parsed; see progression.extract_score.
"""

from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


EVALUATION_PROMPT = """\
Thou art the keeper of a medieval shop, judging the counsel a shopkeeper gives \
to a villager who brings a modern technology trouble phrased in olde English.

Villager's question: {{{question}}}
Shopkeeper's answer: {{{answer}}}

Judge the answer for helpfulness, technical accuracy and Shakespearean flair.
Reply in exactly this format and nothing else:
Score: <a whole number from 0 to 100>
Feedback: <one or two sentences in Shakespearean English>
Suggestion: <one sentence on how the answer could be improved>
"""

QUESTION_PROMPT = """\
Write {{count}} short questions that medieval villagers might ask a shopkeeper \
about modern technology troubles, phrased in Shakespearean English \
(for example: "How fixeth a frozen crystal ball?").
{{#if avoid}}Do not repeat any of these:
{{#each avoid}}- {{{this}}}
{{/each}}{{/if}}
Return one question per line, with no numbering and no other text.
"""


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def evaluation_prompt(question: str, answer: str) -> str:
    return render_prompt(EVALUATION_PROMPT, {"question": question, "answer": answer})


def question_prompt(count: int, avoid: list[str] | None = None) -> str:
    return render_prompt(QUESTION_PROMPT, {"count": count, "avoid": avoid or []})
