"""FastAPI dependencies."""
from fastapi import Request

from companion_policy.gate import RegenerationGate


def get_gate(request: Request) -> RegenerationGate:
    """Gate attached to the running app by create_app()."""
    return request.app.state.gate
