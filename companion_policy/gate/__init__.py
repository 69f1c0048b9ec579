"""
Summary regeneration gate.

Time + message-count debounce for the per-user summary job, its state
stores, and the cold-path trigger that drives it.
"""

from companion_policy.gate.state_store import (
    GenerationState,
    GenerationStateStore,
    InMemoryGenerationStateStore,
    SqlGenerationStateStore,
)
from companion_policy.gate.regeneration_gate import (
    RegenerationGate,
    build_gate,
    get_default_gate,
    set_default_gate,
    should_generate,
    increment_message_count,
    mark_generated,
    get_generation_state,
    has_enough_messages,
    has_enough_time_passed,
    get_time_until_next_generation,
    get_messages_until_next_generation,
    clear_user_state,
)
from companion_policy.gate.summary_trigger import SummaryTrigger

__all__ = [
    "GenerationState",
    "GenerationStateStore",
    "InMemoryGenerationStateStore",
    "SqlGenerationStateStore",
    "RegenerationGate",
    "build_gate",
    "get_default_gate",
    "set_default_gate",
    "should_generate",
    "increment_message_count",
    "mark_generated",
    "get_generation_state",
    "has_enough_messages",
    "has_enough_time_passed",
    "get_time_until_next_generation",
    "get_messages_until_next_generation",
    "clear_user_state",
    "SummaryTrigger",
]
