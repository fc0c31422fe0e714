"""Pydantic schemas for the function handlers."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class HttpRequest(BaseModel):
    """The parts of an HTTP request the helloWorld handler looks at."""

    method: str
    path: str


class HelloResponse(BaseModel):
    ok: bool = True
    message: str
    ts: int  # epoch millis


class CallablePayload(BaseModel):
    """Input of the ping callable. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: Any = None


class CallableContext(BaseModel):
    """Identity of the caller, filled in by the hosting layer."""

    uid: str | None = None


class CallableResult(BaseModel):
    message: str
    ts: int  # epoch millis
