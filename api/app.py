"""FastAPI application factory and configuration."""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import request_logging_middleware
from api.exceptions import register_exception_handlers
from api.routes import health, summary_gate, understanding
from companion_policy import __version__
from companion_policy.config import GateSettings, STORE_BACKEND_DATABASE
from companion_policy.gate import RegenerationGate, build_gate


def create_app(gate: Optional[RegenerationGate] = None, settings: Optional[GateSettings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        gate: Gate to serve (built from settings when omitted)
        settings: Gate settings (read from the environment when omitted)

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Companion Policy API",
        version=__version__,
        description="Summary regeneration gate and understanding level service"
    )

    if gate is None:
        settings = settings or GateSettings.from_env()
        if settings.store_backend == STORE_BACKEND_DATABASE:
            from db.db import init_db
            init_db()
        gate = build_gate(settings)
    app.state.gate = gate

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(request_logging_middleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(summary_gate.router)
    app.include_router(understanding.router)

    return app
