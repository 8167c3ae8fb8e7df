"""Pydantic request models for API endpoints."""

from pydantic import BaseModel


class EvaluateBody(BaseModel):
    # Empty strings are rejected by the pipeline with a 400, not a 422.
    question: str = ""
    answer: str = ""


class RequestHintsBody(BaseModel):
    phone_number: str | None = None
