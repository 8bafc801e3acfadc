"""Opt-in counter telemetry for pyfulmen.

Telemetry is off by default. Callers install an emitter once at startup:

    from pyfulmen import telemetry

    telemetry.enable(telemetry.LoggingEmitter())

Every emission point in the library checks the module-level emitter reference and
returns immediately when it is ``None``, so disabled telemetry costs one comparison.
Emission is fire-and-forget: emitter errors are logged at debug level and never
propagate into the calling operation.
"""

import threading
from collections import defaultdict
from typing import Optional, Protocol

from loguru import logger

from pyfulmen.config import get_config


class CounterEmitter(Protocol):
    """Contract for telemetry backends."""

    def counter(self, name: str, value: float, tags: Optional[dict[str, str]]) -> None:
        """Record a counter increment."""
        ...


# --- Module State ---
_emitter: Optional[CounterEmitter] = None


def enable(emitter: CounterEmitter) -> None:
    """Install ``emitter`` as the process-wide telemetry sink."""
    global _emitter
    _emitter = emitter
    logger.debug("Telemetry enabled", emitter=type(emitter).__name__)


def disable() -> None:
    """Remove the process-wide telemetry sink."""
    global _emitter
    _emitter = None


def is_enabled() -> bool:
    return _emitter is not None


def emit_counter(name: str, value: float = 1, tags: Optional[dict[str, str]] = None) -> None:
    """Emit a counter through the installed sink.

    This never raises. If no sink is installed this is a no-op.

    Args:
        name: Metric name, e.g. "foundry.similarity.distance.calls"
        value: Increment amount
        tags: Optional metric tags
    """
    emitter = _emitter
    if emitter is None:
        return

    try:
        emitter.counter(name, value, tags)
    except Exception as e:
        logger.debug(f"Telemetry emission failed for {name}: {e}")


def configure_from_config() -> None:
    """Enable the logging emitter when ``PYFULMEN_TELEMETRY_ENABLED`` is set."""
    if get_config().telemetry_enabled and _emitter is None:
        enable(LoggingEmitter())


# --- Emitters ---


class LoggingEmitter:
    """Emitter that writes each counter as a structured loguru record."""

    def __init__(self, level: str = "DEBUG"):
        self.level = level

    def counter(self, name: str, value: float, tags: Optional[dict[str, str]]) -> None:
        logger.log(self.level, "telemetry counter", metric=name, value=value, tags=tags or {})


class MemoryEmitter:
    """Thread-safe in-memory emitter that aggregates counters.

    Counters are keyed by name plus the sorted tag items, which makes it convenient
    for tests and for quick diagnostics in long-running processes.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: dict[tuple[str, tuple[tuple[str, str], ...]], float] = defaultdict(float)
        self.events: list[tuple[str, float, dict[str, str]]] = []

    def counter(self, name: str, value: float, tags: Optional[dict[str, str]]) -> None:
        tag_items = tuple(sorted((tags or {}).items()))
        with self._lock:
            self._counters[(name, tag_items)] += value
            self.events.append((name, value, dict(tags or {})))

    def total(self, name: str, **tags: str) -> float:
        """Sum every counter named ``name`` whose tags include ``tags``."""
        with self._lock:
            return sum(
                count
                for (counter_name, tag_items), count in self._counters.items()
                if counter_name == name and set(tags.items()) <= set(tag_items)
            )

    def names(self) -> set[str]:
        with self._lock:
            return {name for name, _ in self._counters}

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self.events.clear()
