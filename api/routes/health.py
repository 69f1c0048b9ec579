"""Health check routes."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from api.dependencies import get_gate
from companion_policy.gate import RegenerationGate, SqlGenerationStateStore
from db.db import get_db

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthcheck(db: Session = Depends(get_db), gate: RegenerationGate = Depends(get_gate)):
    """
    Health check endpoint.

    Tests database connectivity when the gate keeps its state there, and
    reports the gate store in use. The session is lazy, so memory-backed
    deployments never open a connection.
    """
    store = type(gate.store).__name__
    if not isinstance(gate.store, SqlGenerationStateStore):
        return {
            "status": "healthy",
            "database": "not_applicable",
            "gate_store": store
        }

    try:
        db.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
            "gate_store": store
        }
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "gate_store": store,
                "error": str(e)
            }
        )


@router.get("/ready")
def readiness():
    """Readiness check endpoint."""
    return {"status": "ready"}


@router.get("/live")
def liveness():
    """Liveness check endpoint."""
    return {"status": "alive"}
