"""helloWorld: HTTP sanity-check function."""
from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request

from functions.clock import epoch_millis
from functions.deps import get_clock
from functions.log import log_event
from functions.models.schemas import HelloResponse, HttpRequest

router = APIRouter()

logger = logging.getLogger(__name__)

HELLO_MESSAGE = "Hello from Firebase Functions!"
HELLO_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def hello_world(
    request: HttpRequest,
    *,
    logger: logging.Logger = logger,
    clock: Callable[[], int] = epoch_millis,
) -> HelloResponse:
    """Log the request line and answer with a fixed greeting."""
    log_event(logger, "helloWorld invoked", method=request.method, path=request.path)
    return HelloResponse(ok=True, message=HELLO_MESSAGE, ts=clock())


@router.api_route("/helloWorld", methods=HELLO_METHODS, response_model=HelloResponse)
@router.api_route("/helloWorld/{subpath:path}", methods=HELLO_METHODS, response_model=HelloResponse)
async def hello_world_endpoint(request: Request, clock: Callable[[], int] = Depends(get_clock)):
    """Invoke helloWorld. The body is never read."""
    # Path relative to the function URL, "/" for the function itself
    path = "/" + request.path_params.get("subpath", "")
    return hello_world(HttpRequest(method=request.method, path=path), clock=clock)
