"""FastAPI dependencies shared by the function routes."""
from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from functions.clock import epoch_millis
from functions.config import Settings
from functions.policy import AdmissionPolicy, policy_from_settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock() -> Callable[[], int]:
    return epoch_millis


def get_ping_policy(settings: Settings = Depends(get_settings)) -> AdmissionPolicy:
    return policy_from_settings(settings)
