"""Signal handling semantics shared by Fulmen applications.

The signal catalog describes, for each supported POSIX signal, the expected
application behavior (graceful shutdown, reload, double-tap interrupt...), the
exit code to use and what to do on Windows, where most signals do not exist.
The catalog is descriptive: consumers decide whether to act on a fallback.

    from pyfulmen.foundry.signals import default_signal_catalog

    term = default_signal_catalog().get_signal("term")
    term.exit_code          # 143
    term.timeout_seconds    # 30
"""

import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from pyfulmen.foundry.catalog import SIGNALS_FILE, load_asset
from pyfulmen.foundry.errors import CatalogLoadError, SignalNotFoundError


@dataclass(frozen=True)
class WindowsFallback:
    """What to do on Windows when a signal has no console event equivalent."""

    fallback_behavior: str
    log_level: str = ""
    log_message: str = ""
    log_template: str = ""
    operation_hint: str = ""
    telemetry_event: str = ""
    telemetry_tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SignalDefinition:
    id: str
    name: str
    unix_number: int
    description: str = ""
    default_behavior: str = ""
    exit_code: int = 0
    timeout_seconds: int = 0
    platform_overrides: dict[str, int] = field(default_factory=dict)
    windows_event: Optional[str] = None
    windows_fallback: Optional[WindowsFallback] = None
    double_tap_window_seconds: Optional[int] = None
    double_tap_message: str = ""
    double_tap_behavior: str = ""
    double_tap_exit_code: Optional[int] = None
    reload_strategy: str = ""
    validation_required: Optional[bool] = None
    cleanup_actions: tuple[str, ...] = ()
    usage_notes: str = ""

    @property
    def supports_windows_event(self) -> bool:
        return bool(self.windows_event)

    def number_for(self, platform: Optional[str] = None) -> int:
        """Signal number on ``platform`` (defaults to the running one).

        Platform overrides are keyed by ``sys.platform`` style names such as
        ``darwin`` or ``freebsd``; a ``freebsd14`` platform matches ``freebsd``.
        """
        platform = (platform or sys.platform).lower()
        if platform in self.platform_overrides:
            return self.platform_overrides[platform]
        for key, number in self.platform_overrides.items():
            if platform.startswith(key):
                return number
        return self.unix_number

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SignalDefinition":
        fallback = data.get("windows_fallback")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            unix_number=int(data["unix_number"]),
            description=str(data.get("description") or ""),
            default_behavior=str(data.get("default_behavior") or ""),
            exit_code=int(data.get("exit_code", 0)),
            timeout_seconds=int(data.get("timeout_seconds", 0)),
            platform_overrides={
                str(k).lower(): int(v) for k, v in (data.get("platform_overrides") or {}).items()
            },
            windows_event=data.get("windows_event") or None,
            windows_fallback=(
                WindowsFallback(
                    fallback_behavior=str(fallback["fallback_behavior"]),
                    log_level=str(fallback.get("log_level") or ""),
                    log_message=str(fallback.get("log_message") or ""),
                    log_template=str(fallback.get("log_template") or ""),
                    operation_hint=str(fallback.get("operation_hint") or ""),
                    telemetry_event=str(fallback.get("telemetry_event") or ""),
                    telemetry_tags={
                        str(k): str(v) for k, v in (fallback.get("telemetry_tags") or {}).items()
                    },
                )
                if fallback
                else None
            ),
            double_tap_window_seconds=data.get("double_tap_window_seconds"),
            double_tap_message=str(data.get("double_tap_message") or ""),
            double_tap_behavior=str(data.get("double_tap_behavior") or ""),
            double_tap_exit_code=data.get("double_tap_exit_code"),
            reload_strategy=str(data.get("reload_strategy") or ""),
            validation_required=data.get("validation_required"),
            cleanup_actions=tuple(str(action) for action in data.get("cleanup_actions") or []),
            usage_notes=str(data.get("usage_notes") or ""),
        )


class SignalCatalog:
    """Lazily loaded, read-only signal catalog."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = data_dir
        self._lock = threading.Lock()
        self._loaded = False
        self._version = ""
        self._description = ""
        self._by_id: dict[str, SignalDefinition] = {}
        self._by_name: dict[str, SignalDefinition] = {}

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._loaded:
                return
            data = load_asset(SIGNALS_FILE, "signals", self.data_dir)
            try:
                signals = [SignalDefinition.from_dict(raw) for raw in data["signals"]]
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogLoadError(SIGNALS_FILE, f"malformed signal entry: {e}") from e

            for signal in signals:
                if not signal.windows_event and signal.windows_fallback is None:
                    raise CatalogLoadError(
                        SIGNALS_FILE,
                        f"signal {signal.id!r} needs a windows_event or a windows_fallback",
                    )

            self._version = str(data.get("version", ""))
            self._description = str(data.get("description") or "")
            self._by_id = {signal.id.lower(): signal for signal in signals}
            self._by_name = {signal.name.upper(): signal for signal in signals}
            self._loaded = True
            logger.debug("Signal catalog loaded", version=self._version, signals=len(signals))

    @property
    def version(self) -> str:
        self._ensure_loaded()
        return self._version

    @property
    def description(self) -> str:
        self._ensure_loaded()
        return self._description

    def get_signal(self, signal_id: str) -> SignalDefinition:
        """Look up a signal by id, e.g. ``"term"``.

        Raises:
            SignalNotFoundError: If the id is unknown
        """
        self._ensure_loaded()
        signal = self._by_id.get(signal_id.strip().lower())
        if signal is None:
            raise SignalNotFoundError(signal_id)
        return signal

    def get_signal_by_name(self, name: str) -> SignalDefinition:
        """Look up a signal by POSIX name, e.g. ``"SIGTERM"``.

        Raises:
            SignalNotFoundError: If the name is unknown
        """
        self._ensure_loaded()
        signal = self._by_name.get(name.strip().upper())
        if signal is None:
            raise SignalNotFoundError(name)
        return signal

    def list_signals(self) -> list[SignalDefinition]:
        self._ensure_loaded()
        return list(self._by_id.values())


# --- Module State ---
_default_signal_catalog: Optional[SignalCatalog] = None
_default_lock = threading.Lock()


def default_signal_catalog() -> SignalCatalog:
    global _default_signal_catalog
    with _default_lock:
        if _default_signal_catalog is None:
            _default_signal_catalog = SignalCatalog()
        return _default_signal_catalog
