"""
Summary trigger for the cold path.

Runs the caller's summary generator after a chat message when the
regeneration gate allows it. Fire and forget: failures are logged and never
propagate to the request that delivered the message.
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional, Set

from companion_policy.gate.regeneration_gate import RegenerationGate
from utils.telemetry import perf_timer

logger = logging.getLogger(__name__)

# generator(user_id, trace_id) -> summary text (falsy when nothing was produced)
SummaryGenerator = Callable[[str, Optional[str]], Awaitable[Optional[str]]]


class SummaryTrigger:
    """Couples a RegenerationGate with a summary generator."""

    def __init__(self, gate: RegenerationGate, generator: SummaryGenerator):
        self.gate = gate
        self.generator = generator
        self._in_flight: Set[str] = set()
        self._in_flight_lock = threading.Lock()

    def _claim(self, user_id: str) -> bool:
        with self._in_flight_lock:
            if user_id in self._in_flight:
                return False
            self._in_flight.add(user_id)
            return True

    def _release(self, user_id: str) -> None:
        with self._in_flight_lock:
            self._in_flight.discard(user_id)

    def is_in_flight(self, user_id: str) -> bool:
        with self._in_flight_lock:
            return user_id in self._in_flight

    async def on_message(
        self,
        user_id: str,
        force: bool = False,
        trace_id: Optional[str] = None
    ) -> bool:
        """
        Record an inbound message and generate a summary if one is due.

        Args:
            user_id: User who sent the message
            force: Bypass the gate (manual regeneration)
            trace_id: Trace ID for logging

        Returns:
            True if a summary was generated and the gate was marked
        """
        try:
            count = self.gate.increment_message_count(user_id)
            logger.debug(
                "cold_path:message_recorded",
                extra={"trace_id": trace_id, "user_id": user_id, "message_count": count}
            )
            return await self._run_if_due(user_id, force, trace_id)
        except Exception as e:
            self._log_trigger_error(e, user_id, trace_id)
            return False

    async def run_if_due(
        self,
        user_id: str,
        force: bool = False,
        trace_id: Optional[str] = None
    ) -> bool:
        """Generate a summary if the gate allows it, without recording a message."""
        try:
            return await self._run_if_due(user_id, force, trace_id)
        except Exception as e:
            self._log_trigger_error(e, user_id, trace_id)
            return False

    def _log_trigger_error(self, error: Exception, user_id: str, trace_id: Optional[str]) -> None:
        # Don't raise - cold path must not break the hot path
        logger.error(
            "cold_path:trigger_error",
            extra={
                "trace_id": trace_id,
                "user_id": user_id,
                "error": str(error),
                "error_type": type(error).__name__
            },
            exc_info=True
        )

    async def _run_if_due(self, user_id: str, force: bool, trace_id: Optional[str]) -> bool:
        if not self.gate.should_generate(user_id, force=force):
            return False

        if not self._claim(user_id):
            logger.info(
                "cold_path:summary_already_running",
                extra={"trace_id": trace_id, "user_id": user_id}
            )
            return False

        try:
            return await self._generate(user_id, trace_id)
        finally:
            self._release(user_id)

    async def _generate(self, user_id: str, trace_id: Optional[str]) -> bool:
        logger.info(
            "cold_path:summary_started",
            extra={"trace_id": trace_id, "user_id": user_id}
        )

        try:
            with perf_timer("COLD_PATH", "summary_generation", {"trace_id": trace_id, "user_id": user_id}):
                summary = await self.generator(user_id, trace_id)
        except Exception as e:
            logger.error(
                "cold_path:summary_error",
                extra={
                    "trace_id": trace_id,
                    "user_id": user_id,
                    "error": str(e),
                    "error_type": type(e).__name__
                }
            )
            # Gate stays unmarked so the next message retries
            return False

        if not summary:
            logger.warning(
                "cold_path:summary_empty",
                extra={"trace_id": trace_id, "user_id": user_id}
            )
            return False

        self.gate.mark_generated(user_id)

        logger.info(
            "cold_path:summary_completed",
            extra={
                "trace_id": trace_id,
                "user_id": user_id,
                "summary_length": len(summary)
            }
        )
        return True

    def schedule(
        self,
        user_id: str,
        force: bool = False,
        trace_id: Optional[str] = None
    ) -> "asyncio.Task[bool]":
        """
        Run on_message in the background on the running event loop.

        Must be called from inside a coroutine.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.on_message(user_id, force=force, trace_id=trace_id))
        logger.debug(
            "cold_path:summary_scheduled",
            extra={"trace_id": trace_id, "user_id": user_id}
        )
        return task
