"""Request models for API endpoints."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class GateEventRequest(BaseModel):
    """Optional body for message / generated events."""
    trace_id: Optional[str] = Field(None, description="Trace ID for request tracking", max_length=128)

    @field_validator('trace_id')
    @classmethod
    def validate_trace_id(cls, v):
        """Reject blank trace IDs."""
        if v is not None and not v.strip():
            raise ValueError("trace_id cannot be blank")
        return v


class GateCheckRequest(GateEventRequest):
    """Ask the gate whether a summary may be generated now."""
    force: bool = Field(False, description="Bypass the debounce (manual regeneration)")
