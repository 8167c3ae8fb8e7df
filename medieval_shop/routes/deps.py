"""Request-scoped access to the clients created in app.create_app()."""

from fastapi import Request

from medieval_shop.llm import LLM
from medieval_shop.pipeline import Notifier


def get_llm(request: Request) -> LLM:
    return request.app.state.llm


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
