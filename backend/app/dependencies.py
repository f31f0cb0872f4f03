"""FastAPI dependency injection."""

from __future__ import annotations

from app.config import settings
from app.dashboard.sessions import SessionStore, get_session_store
from app.llm.client import ModelInvoker, get_model_invoker


def get_settings():
    return settings


def get_invoker() -> ModelInvoker:
    return get_model_invoker()


def get_sessions() -> SessionStore:
    return get_session_store()
