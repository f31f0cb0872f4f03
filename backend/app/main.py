"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.geovisual_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="GeoVisual Insights",
        description="Keyframe imagery analysis: vegetation, soil, infrastructure and proximity flows",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all flow modules to trigger registration
    _register_flows()

    from app.api.router import api_router

    app.include_router(api_router)

    return app


def _register_flows() -> None:
    """Import all flow modules so their define_flow calls run."""
    import importlib
    import pkgutil

    package = importlib.import_module("app.flows")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"app.flows.{module_name}")


app = create_app()
