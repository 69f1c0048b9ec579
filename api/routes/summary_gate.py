"""Summary regeneration gate routes."""
from typing import Annotated, Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, Path, Request

from api.dependencies import get_gate
from api.models.requests import GateCheckRequest, GateEventRequest
from api.models.responses import APIResponse
from companion_policy.gate import RegenerationGate
from utils import format_iso_ms, get_logger

logger = get_logger("summary_gate_routes")

router = APIRouter(prefix="/api/summary-gate", tags=["summary-gate"])

UserId = Annotated[str, Path(min_length=1, max_length=128, description="User identifier")]


def _gate_status(gate: RegenerationGate, user_id: str) -> Dict[str, Any]:
    state = gate.get_generation_state(user_id)
    return {
        "user_id": user_id,
        "tracked": state is not None,
        "messages_since_last_generation": state.messages_since_last_generation if state else 0,
        "last_generated_at": format_iso_ms(state.last_generated_at) if state else None,
        "has_enough_messages": gate.has_enough_messages(user_id),
        "has_enough_time_passed": gate.has_enough_time_passed(user_id),
        "ms_until_next_generation": gate.get_time_until_next_generation(user_id),
        "messages_until_next_generation": gate.get_messages_until_next_generation(user_id),
        "should_generate": gate.should_generate(user_id),
    }


def _trace_id(request: Request, body: Optional[Union[GateEventRequest, GateCheckRequest]]) -> Optional[str]:
    return (body.trace_id if body else None) or getattr(request.state, "trace_id", None)


@router.get("/config")
def gate_config(gate: RegenerationGate = Depends(get_gate)):
    """Debounce thresholds in effect."""
    return APIResponse.success(data=gate.config)


@router.post("/maintenance/evict")
def evict_expired(gate: RegenerationGate = Depends(get_gate)):
    """Drop gate state that has been idle longer than the configured TTL."""
    removed = gate.evict_expired()
    return APIResponse.success(data={"removed": removed})


@router.get("/{user_id}")
def gate_status(user_id: UserId, gate: RegenerationGate = Depends(get_gate)):
    """Current gate state and projections for a user."""
    return APIResponse.success(data=_gate_status(gate, user_id))


@router.post("/{user_id}/messages")
def record_message(
    user_id: UserId,
    request: Request,
    body: Optional[GateEventRequest] = None,
    gate: RegenerationGate = Depends(get_gate)
):
    """
    Record one inbound chat message for a user.

    No try/except - exceptions bubble to centralized handler.
    """
    count = gate.increment_message_count(user_id)
    logger.debug(
        "message_recorded",
        extra={"trace_id": _trace_id(request, body), "user_id": user_id, "message_count": count}
    )
    return APIResponse.success(data={
        "user_id": user_id,
        "messages_since_last_generation": count,
        "should_generate": gate.should_generate(user_id),
    })


@router.post("/{user_id}/check")
def check_generation(
    user_id: UserId,
    request: Request,
    body: Optional[GateCheckRequest] = None,
    gate: RegenerationGate = Depends(get_gate)
):
    """Decide whether a summary may be generated now (force defaults to False)."""
    force = body.force if body else False
    allowed = gate.should_generate(user_id, force=force)
    logger.info(
        "generation_checked",
        extra={
            "trace_id": _trace_id(request, body),
            "user_id": user_id,
            "force": force,
            "should_generate": allowed
        }
    )
    return APIResponse.success(data={"user_id": user_id, "should_generate": allowed, "forced": force})


@router.post("/{user_id}/generated")
def mark_generated(
    user_id: UserId,
    request: Request,
    body: Optional[GateEventRequest] = None,
    gate: RegenerationGate = Depends(get_gate)
):
    """Record that a summary finished generating. Call only after it completed."""
    gate.mark_generated(user_id)
    logger.info("generation_marked", extra={"trace_id": _trace_id(request, body), "user_id": user_id})
    return APIResponse.success(data=_gate_status(gate, user_id), message="Summary generation recorded")


@router.delete("/{user_id}")
def clear_state(user_id: UserId, gate: RegenerationGate = Depends(get_gate)):
    """Forget a user's gate state; the next check counts as first observation."""
    gate.clear_user_state(user_id)
    return APIResponse.success(data={"user_id": user_id, "cleared": True})
