"""
Generation state stores.

The regeneration gate keeps one GenerationState per user id. Stores are
injectable so tests get isolated instances and deployments can choose between
process memory and the database.

Every store hands out a per-user lock; the gate holds it across a
read-modify-write so concurrent increments for the same user are not lost.
Locks are striped (a fixed pool indexed by the user id hash) so the lock
table never grows with the number of users.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, replace, asdict
from datetime import timedelta
from typing import Callable, Dict, Any, Iterator, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from companion_policy.exceptions import StateStoreError
from db.db import session_scope
from db.models.generation_state import GenerationStateModel
from utils.datetime_utils import now_ms, ms_to_datetime

logger = logging.getLogger(__name__)

DEFAULT_LOCK_STRIPES = 64


@dataclass
class GenerationState:
    """Debounce state for one user."""
    last_generated_at: int = 0
    messages_since_last_generation: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GenerationStateStore(ABC):
    """Keyed storage for GenerationState with per-user locking."""

    def __init__(self, lock_stripes: int = DEFAULT_LOCK_STRIPES):
        if lock_stripes < 1:
            raise ValueError("lock_stripes must be >= 1")
        self._locks = [threading.RLock() for _ in range(lock_stripes)]

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        """Serialize access to one user's state within this process."""
        stripe = self._locks[hash(user_id) % len(self._locks)]
        with stripe:
            yield

    @abstractmethod
    def get(self, user_id: str) -> Optional[GenerationState]:
        """Return a copy of the user's state, or None if never observed."""

    @abstractmethod
    def set(self, user_id: str, state: GenerationState) -> None:
        """Insert or replace the user's state."""

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Remove the user's state. Returns True if something was removed."""

    @abstractmethod
    def evict_expired(self) -> int:
        """Drop idle entries past the store's TTL. Returns number removed."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryGenerationStateStore(GenerationStateStore):
    """
    Process-local store.

    Entries are kept in access order. With max_entries set, the least recently
    used entry is dropped on overflow; with ttl_seconds set, entries not read
    or written for that long are swept on the next write or evict_expired().
    State is lost on restart.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], int] = now_ms,
        lock_stripes: int = DEFAULT_LOCK_STRIPES
    ):
        super().__init__(lock_stripes)
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[GenerationState, int]]" = OrderedDict()
        self._map_lock = threading.Lock()

    def _is_expired(self, touched_ms: int, now: int) -> bool:
        return self.ttl_seconds is not None and now - touched_ms >= self.ttl_seconds * 1000

    def get(self, user_id: str) -> Optional[GenerationState]:
        now = self._clock()
        with self._map_lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None

            state, touched = entry
            if self._is_expired(touched, now):
                del self._entries[user_id]
                return None

            self._entries[user_id] = (state, now)
            self._entries.move_to_end(user_id)
            return replace(state)

    def set(self, user_id: str, state: GenerationState) -> None:
        now = self._clock()
        with self._map_lock:
            self._entries[user_id] = (replace(state), now)
            self._entries.move_to_end(user_id)
            removed = self._sweep(now)

            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted_id, _ = self._entries.popitem(last=False)
                    removed += 1
                    logger.debug("gate_store:evicted_lru", extra={"user_id": evicted_id})

        if removed:
            logger.info("gate_store:evicted", extra={"removed": removed, "remaining": len(self)})

    def delete(self, user_id: str) -> bool:
        with self._map_lock:
            return self._entries.pop(user_id, None) is not None

    def _sweep(self, now: int) -> int:
        # Access order matches touch order, so expired entries sit at the front
        removed = 0
        while self._entries:
            oldest_id = next(iter(self._entries))
            _, touched = self._entries[oldest_id]
            if not self._is_expired(touched, now):
                break
            del self._entries[oldest_id]
            removed += 1
        return removed

    def evict_expired(self) -> int:
        now = self._clock()
        with self._map_lock:
            return self._sweep(now)

    def clear(self) -> None:
        with self._map_lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._map_lock:
            return len(self._entries)


class SqlGenerationStateStore(GenerationStateStore):
    """
    Store backed by the generation_state table.

    Survives restarts and is shared by every process using the same database.
    The per-user lock only covers this process; cross-process increments rely
    on the row update. Reads and writes both touch updated_at, so ttl_seconds
    measures idle time the same way the in-memory store does.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], int] = now_ms,
        lock_stripes: int = DEFAULT_LOCK_STRIPES
    ):
        super().__init__(lock_stripes)
        self._session_factory = session_factory
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    @contextmanager
    def _scope(self, operation: str, user_id: Optional[str] = None):
        try:
            with session_scope(self._session_factory) as db:
                yield db
        except SQLAlchemyError as e:
            logger.error(
                "gate_store:db_error",
                extra={"operation": operation, "user_id": user_id, "error": str(e)}
            )
            raise StateStoreError(
                f"Database error during {operation}: {str(e)}",
                operation=operation,
                original_exception=e,
                user_id=user_id
            )

    def get(self, user_id: str) -> Optional[GenerationState]:
        now = ms_to_datetime(self._clock())
        with self._scope("get", user_id) as db:
            if self.ttl_seconds is not None:
                # Idle rows read as missing, same as the in-memory store
                db.execute(
                    delete(GenerationStateModel).where(
                        GenerationStateModel.user_id == user_id,
                        GenerationStateModel.updated_at <= now - timedelta(seconds=self.ttl_seconds)
                    )
                )
            row = db.get(GenerationStateModel, user_id)
            if row is None:
                return None
            row.updated_at = now
            return GenerationState(
                last_generated_at=row.last_generated_at_ms or 0,
                messages_since_last_generation=row.messages_since_last_generation or 0
            )

    def set(self, user_id: str, state: GenerationState) -> None:
        touched = ms_to_datetime(self._clock())
        with self._scope("set", user_id) as db:
            row = db.get(GenerationStateModel, user_id)
            if row is None:
                row = GenerationStateModel(user_id=user_id)
                db.add(row)
            row.last_generated_at_ms = state.last_generated_at
            row.messages_since_last_generation = state.messages_since_last_generation
            row.updated_at = touched

    def delete(self, user_id: str) -> bool:
        with self._scope("delete", user_id) as db:
            result = db.execute(
                delete(GenerationStateModel).where(GenerationStateModel.user_id == user_id)
            )
            return (result.rowcount or 0) > 0

    def evict_expired(self) -> int:
        if self.ttl_seconds is None:
            return 0

        cutoff = ms_to_datetime(self._clock()) - timedelta(seconds=self.ttl_seconds)
        with self._scope("evict_expired") as db:
            result = db.execute(
                delete(GenerationStateModel).where(GenerationStateModel.updated_at <= cutoff)
            )
            removed = result.rowcount or 0

        if removed:
            logger.info("gate_store:evicted", extra={"removed": removed})
        return removed

    def __len__(self) -> int:
        with self._scope("count") as db:
            return db.execute(select(func.count()).select_from(GenerationStateModel)).scalar_one()
