"""Admission policies evaluated before a callable runs.

A policy receives the invocation's ``CallableContext`` and denies the call
by raising ``HttpsError``; returning normally admits it.
"""
from __future__ import annotations

from typing import Callable

from functions.config import Settings
from functions.errors import HttpsError
from functions.models.schemas import CallableContext

AdmissionPolicy = Callable[[CallableContext], None]


def allow_all(context: CallableContext) -> None:
    return None


def require_auth(context: CallableContext) -> None:
    if context.uid is None:
        raise HttpsError("unauthenticated", "Sign-in required")


def policy_from_settings(settings: Settings) -> AdmissionPolicy:
    return require_auth if settings.require_auth else allow_all
