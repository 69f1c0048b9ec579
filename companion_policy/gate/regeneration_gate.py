"""
Summary regeneration gate.

Debounces the expensive per-user summary job:
- First observation of a user always allows generation
- Afterwards both gates must clear: at least `minimum_interval_ms` since the
  last generation AND at least `messages_threshold` messages since then
- `force=True` bypasses the gate (manual requests)

Call order for consumers:
    increment_message_count(user_id)      # every inbound chat message
    if should_generate(user_id):
        ...generate summary...
        mark_generated(user_id)           # only after it actually completed
"""

import logging
from typing import Callable, Dict, Optional

from sqlalchemy.orm import sessionmaker

from companion_policy.config import (
    DEFAULT_MIN_INTERVAL_MS,
    DEFAULT_MESSAGES_THRESHOLD,
    STORE_BACKEND_DATABASE,
    GateSettings,
)
from companion_policy.gate.state_store import (
    GenerationState,
    GenerationStateStore,
    InMemoryGenerationStateStore,
    SqlGenerationStateStore,
)
from utils.datetime_utils import now_ms

logger = logging.getLogger(__name__)


class RegenerationGate:
    """Time + volume debounce for per-user summary generation."""

    def __init__(
        self,
        store: Optional[GenerationStateStore] = None,
        minimum_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        messages_threshold: int = DEFAULT_MESSAGES_THRESHOLD,
        clock: Callable[[], int] = now_ms
    ):
        self.store = store if store is not None else InMemoryGenerationStateStore(clock=clock)
        self.minimum_interval_ms = minimum_interval_ms
        self.messages_threshold = messages_threshold
        self._clock = clock

    @property
    def config(self) -> Dict[str, int]:
        return {
            "minimum_interval_ms": self.minimum_interval_ms,
            "messages_threshold": self.messages_threshold,
        }

    def should_generate(self, user_id: str, force: bool = False) -> bool:
        """
        Check if summary generation should be triggered for a user.

        Args:
            user_id: The user ID
            force: Bypass the debounce (manual generation requests)

        Returns:
            True if generation may proceed
        """
        if force:
            logger.info("summary_gate:force_requested", extra={"user_id": user_id})
            return True

        state = self.store.get(user_id)
        if state is None:
            logger.info("summary_gate:first_generation", extra={"user_id": user_id})
            return True

        elapsed_ms = self._clock() - state.last_generated_at
        enough_messages = state.messages_since_last_generation >= self.messages_threshold
        enough_time = elapsed_ms >= self.minimum_interval_ms

        context = {
            "user_id": user_id,
            "messages": state.messages_since_last_generation,
            "messages_threshold": self.messages_threshold,
            "elapsed_s": round(elapsed_ms / 1000),
            "interval_s": self.minimum_interval_ms // 1000,
        }

        if enough_messages and enough_time:
            logger.info("summary_gate:allowed", extra=context)
            return True

        logger.info("summary_gate:skipped", extra=context)
        return False

    def increment_message_count(self, user_id: str) -> int:
        """
        Record one more message for a user.

        Returns:
            The new message count since the last generation
        """
        with self.store.lock(user_id):
            state = self.store.get(user_id)
            if state is None:
                state = GenerationState(last_generated_at=0, messages_since_last_generation=1)
            else:
                state.messages_since_last_generation += 1
            self.store.set(user_id, state)

        return state.messages_since_last_generation

    def mark_generated(self, user_id: str) -> None:
        """Reset the message counter and stamp the generation time."""
        with self.store.lock(user_id):
            self.store.set(
                user_id,
                GenerationState(last_generated_at=self._clock(), messages_since_last_generation=0)
            )
        logger.info("summary_gate:marked_generated", extra={"user_id": user_id})

    def get_generation_state(self, user_id: str) -> Optional[GenerationState]:
        return self.store.get(user_id)

    def has_enough_messages(self, user_id: str) -> bool:
        state = self.store.get(user_id)
        if state is None:
            return True
        return state.messages_since_last_generation >= self.messages_threshold

    def has_enough_time_passed(self, user_id: str) -> bool:
        state = self.store.get(user_id)
        if state is None:
            return True
        return self._clock() - state.last_generated_at >= self.minimum_interval_ms

    def get_time_until_next_generation(self, user_id: str) -> int:
        """Milliseconds until the time gate clears, 0 if it already has."""
        state = self.store.get(user_id)
        if state is None:
            return 0
        elapsed = self._clock() - state.last_generated_at
        return max(0, self.minimum_interval_ms - elapsed)

    def get_messages_until_next_generation(self, user_id: str) -> int:
        """Messages until the volume gate clears, 0 if it already has."""
        state = self.store.get(user_id)
        if state is None:
            return 0
        return max(0, self.messages_threshold - state.messages_since_last_generation)

    def clear_user_state(self, user_id: str) -> None:
        with self.store.lock(user_id):
            self.store.delete(user_id)

    def evict_expired(self) -> int:
        return self.store.evict_expired()


def build_gate(
    settings: GateSettings,
    session_factory: Optional[sessionmaker] = None,
    clock: Callable[[], int] = now_ms
) -> RegenerationGate:
    """
    Build a gate and its store from settings.

    Args:
        settings: Gate settings (usually GateSettings.from_env())
        session_factory: Session factory for the database backend
            (defaults to db.db.SessionLocal)
        clock: Epoch-millis clock

    Returns:
        Configured RegenerationGate
    """
    if settings.store_backend == STORE_BACKEND_DATABASE:
        if session_factory is None:
            from db.db import SessionLocal
            session_factory = SessionLocal
        store = SqlGenerationStateStore(
            session_factory,
            ttl_seconds=settings.state_ttl_seconds,
            clock=clock
        )
    else:
        store = InMemoryGenerationStateStore(
            max_entries=settings.max_entries,
            ttl_seconds=settings.state_ttl_seconds,
            clock=clock
        )

    logger.info(
        "summary_gate:built",
        extra={
            "store_backend": settings.store_backend,
            "minimum_interval_ms": settings.minimum_interval_ms,
            "messages_threshold": settings.messages_threshold,
        }
    )

    return RegenerationGate(
        store=store,
        minimum_interval_ms=settings.minimum_interval_ms,
        messages_threshold=settings.messages_threshold,
        clock=clock
    )


# ---- process-wide default gate ----

_default_gate: Optional[RegenerationGate] = None


def get_default_gate() -> RegenerationGate:
    global _default_gate
    if _default_gate is None:
        _default_gate = RegenerationGate()
    return _default_gate


def set_default_gate(gate: Optional[RegenerationGate]) -> None:
    """Replace the process-wide gate (None resets to a fresh in-memory gate on next use)."""
    global _default_gate
    _default_gate = gate


def should_generate(user_id: str, force: bool = False) -> bool:
    return get_default_gate().should_generate(user_id, force)


def increment_message_count(user_id: str) -> int:
    return get_default_gate().increment_message_count(user_id)


def mark_generated(user_id: str) -> None:
    get_default_gate().mark_generated(user_id)


def get_generation_state(user_id: str) -> Optional[GenerationState]:
    return get_default_gate().get_generation_state(user_id)


def has_enough_messages(user_id: str) -> bool:
    return get_default_gate().has_enough_messages(user_id)


def has_enough_time_passed(user_id: str) -> bool:
    return get_default_gate().has_enough_time_passed(user_id)


def get_time_until_next_generation(user_id: str) -> int:
    return get_default_gate().get_time_until_next_generation(user_id)


def get_messages_until_next_generation(user_id: str) -> int:
    return get_default_gate().get_messages_until_next_generation(user_id)


def clear_user_state(user_id: str) -> None:
    get_default_gate().clear_user_state(user_id)
