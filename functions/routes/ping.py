"""ping: callable function echoing a greeting.

Callable requests are ``POST {"data": {...}}``; successful calls answer
``{"result": {...}}`` and failures ``{"error": {"status", "message"}}``.
"""
from __future__ import annotations

import json
import logging
import math
from decimal import Decimal
from typing import Any, Callable

from fastapi import APIRouter, Depends, Header, Request

from functions.auth import resolve_context
from functions.clock import epoch_millis
from functions.config import Settings
from functions.deps import get_clock, get_ping_policy, get_settings
from functions.errors import HttpsError
from functions.log import log_event
from functions.models.schemas import CallableContext, CallablePayload, CallableResult
from functions.policy import AdmissionPolicy, allow_all

router = APIRouter()

logger = logging.getLogger(__name__)

DEFAULT_NAME = "friend"


def _format_float(value: float) -> str:
    """Shortest round-trip digits; exponent form only below 1e-6 or from 1e21 up."""
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    number = Decimal(repr(value))
    magnitude = abs(value)
    if 1e-6 <= magnitude < 1e21:
        text = format(number, "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    sign, digits, exponent = number.normalize().as_tuple()
    exponent += len(digits) - 1
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return f"{'-' if sign else ''}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, list):
        return ",".join("" if item is None else _render(item) for item in value)
    return json.dumps(value, separators=(",", ":"), default=str)


def to_display_name(value: Any) -> str:
    """Resolve the ``name`` field of a ping payload to display text.

    Missing and falsy values (None, "", 0, False, NaN, empty containers)
    fall back to ``"friend"``. Strings are kept as is and booleans are
    ``"true"``/``"false"``. Numbers use the shortest round-trip digits,
    without a fraction when integral, and switch to exponent form below
    1e-6 or from 1e21 up (``1e21 -> "1e+21"``, ``1e-7 -> "1e-7"``).
    Lists are comma-joined. Objects become compact JSON (``{"a":1}``)
    rather than an opaque placeholder.
    """
    if isinstance(value, float) and math.isnan(value):
        return DEFAULT_NAME
    if not value:
        return DEFAULT_NAME
    return _render(value)


def ping(
    payload: CallablePayload,
    context: CallableContext,
    *,
    logger: logging.Logger = logger,
    clock: Callable[[], int] = epoch_millis,
    policy: AdmissionPolicy = allow_all,
) -> CallableResult:
    """Answer ``pong, <name>``.

    Raises:
        HttpsError: If ``policy`` rejects the caller
    """
    policy(context)
    name = to_display_name(payload.name)
    log_event(logger, "ping called", uid=context.uid, name=name)
    return CallableResult(message=f"pong, {name}", ts=clock())


async def _read_payload(request: Request) -> CallablePayload:
    try:
        body = await request.json()
    except ValueError:
        raise HttpsError("invalid-argument", "Bad Request")

    if not isinstance(body, dict) or "data" not in body:
        raise HttpsError("invalid-argument", "Bad Request")

    data = body["data"]
    if not isinstance(data, dict):
        return CallablePayload()
    return CallablePayload.model_validate(data)


@router.post("/ping")
async def ping_endpoint(
    request: Request,
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    policy: AdmissionPolicy = Depends(get_ping_policy),
    clock: Callable[[], int] = Depends(get_clock),
):
    """Invoke the ping callable."""
    try:
        payload = await _read_payload(request)
        context = resolve_context(authorization, settings.auth_secret)
        result = ping(payload, context, clock=clock, policy=policy)
    except HttpsError:
        raise
    except Exception as e:
        logger.exception("ping failed")
        raise HttpsError("internal", "INTERNAL") from e

    return {"result": result.model_dump()}
