"""
Environment configuration for the companion policy service.

Values are read from the process environment (a local .env file is loaded
first when present).
"""
import os
from dataclasses import dataclass
from typing import Optional, Mapping

from dotenv import load_dotenv

from companion_policy.exceptions import ConfigurationError

load_dotenv()

DEFAULT_MIN_INTERVAL_MS = 5 * 60 * 1000  # 5 minutes
DEFAULT_MESSAGES_THRESHOLD = 10

STORE_BACKEND_MEMORY = "memory"
STORE_BACKEND_DATABASE = "database"
STORE_BACKENDS = (STORE_BACKEND_MEMORY, STORE_BACKEND_DATABASE)


def _read_int(
    env: Mapping[str, str],
    name: str,
    default: Optional[int],
    minimum: int = 0
) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            setting=name
        )

    if value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}, got {value}",
            setting=name
        )
    return value


@dataclass(frozen=True)
class GateSettings:
    """Settings for the regeneration gate and its state store."""
    minimum_interval_ms: int = DEFAULT_MIN_INTERVAL_MS
    messages_threshold: int = DEFAULT_MESSAGES_THRESHOLD
    store_backend: str = STORE_BACKEND_MEMORY
    max_entries: Optional[int] = None
    state_ttl_seconds: Optional[int] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GateSettings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Returns:
            GateSettings

        Raises:
            ConfigurationError: If a value is malformed or out of range
        """
        env = os.environ if env is None else env

        backend = (env.get("GATE_STORE_BACKEND") or STORE_BACKEND_MEMORY).strip().lower()
        if backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"GATE_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}",
                setting="GATE_STORE_BACKEND"
            )

        return cls(
            minimum_interval_ms=_read_int(env, "SUMMARY_MIN_INTERVAL_MS", DEFAULT_MIN_INTERVAL_MS),
            messages_threshold=_read_int(env, "SUMMARY_MESSAGES_THRESHOLD", DEFAULT_MESSAGES_THRESHOLD),
            store_backend=backend,
            max_entries=_read_int(env, "GATE_MAX_ENTRIES", None, minimum=1),
            state_ttl_seconds=_read_int(env, "GATE_STATE_TTL_SECONDS", None, minimum=1),
        )


ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./companion_policy.db")
