"""Standardized process exit codes.

``ExitCode`` mirrors the constants in the bundled exit-code catalog, which also
carries descriptions, retry hints, BSD ``sysexits.h`` equivalents and two
simplified modes that collapse the full set for tools that need fewer codes:

    basic      0 success, 1 error, 2 usage error
    severity   0 success through 7 observability error

    import sys
    from pyfulmen.foundry.exit_codes import ExitCode

    sys.exit(ExitCode.EXIT_CONFIG_INVALID)
"""

import threading
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Union

from pyfulmen.foundry.catalog import EXIT_CODES_FILE, load_asset
from pyfulmen.foundry.errors import CatalogLoadError

SIGNAL_CODE_MIN = 128
SIGNAL_CODE_MAX = 165


class ExitCode(IntEnum):
    # Standard
    EXIT_SUCCESS = 0
    EXIT_FAILURE = 1

    # Networking
    EXIT_PORT_IN_USE = 10
    EXIT_PORT_RANGE_EXHAUSTED = 11
    EXIT_INSTANCE_ALREADY_RUNNING = 12
    EXIT_NETWORK_UNREACHABLE = 13
    EXIT_CONNECTION_REFUSED = 14
    EXIT_CONNECTION_TIMEOUT = 15

    # Configuration
    EXIT_CONFIG_INVALID = 20
    EXIT_MISSING_DEPENDENCY = 21
    EXIT_SSOT_VERSION_MISMATCH = 22
    EXIT_CONFIG_FILE_NOT_FOUND = 23
    EXIT_ENVIRONMENT_INVALID = 24

    # Runtime
    EXIT_HEALTH_CHECK_FAILED = 30
    EXIT_DATABASE_UNAVAILABLE = 31
    EXIT_EXTERNAL_SERVICE_UNAVAILABLE = 32
    EXIT_RESOURCE_EXHAUSTED = 33
    EXIT_OPERATION_TIMEOUT = 34

    # Usage
    EXIT_INVALID_ARGUMENT = 40
    EXIT_MISSING_REQUIRED_ARGUMENT = 41
    EXIT_USAGE = 64

    # Permissions and filesystem
    EXIT_PERMISSION_DENIED = 50
    EXIT_FILE_NOT_FOUND = 51
    EXIT_DIRECTORY_NOT_FOUND = 52
    EXIT_FILE_READ_ERROR = 53
    EXIT_FILE_WRITE_ERROR = 54

    # Data
    EXIT_DATA_INVALID = 60
    EXIT_PARSE_ERROR = 61
    EXIT_TRANSFORMATION_FAILED = 62
    EXIT_DATA_CORRUPT = 63

    # Security
    EXIT_AUTHENTICATION_FAILED = 70
    EXIT_AUTHORIZATION_FAILED = 71
    EXIT_SECURITY_VIOLATION = 72
    EXIT_CERTIFICATE_INVALID = 73

    # Observability
    EXIT_METRICS_UNAVAILABLE = 80
    EXIT_TRACING_FAILED = 81
    EXIT_LOGGING_FAILED = 82
    EXIT_ALERT_SYSTEM_FAILED = 83
    EXIT_STRUCTURED_LOGGING_FAILED = 84

    # Testing
    EXIT_TEST_FAILURE = 91
    EXIT_TEST_ERROR = 92
    EXIT_TEST_INTERRUPTED = 93
    EXIT_TEST_USAGE_ERROR = 94
    EXIT_TEST_NO_TESTS_COLLECTED = 95
    EXIT_COVERAGE_THRESHOLD_NOT_MET = 96

    # Signals (128 + signal number)
    EXIT_SIGNAL_HUP = 129
    EXIT_SIGNAL_INT = 130
    EXIT_SIGNAL_QUIT = 131
    EXIT_SIGNAL_KILL = 137
    EXIT_SIGNAL_USR1 = 138
    EXIT_SIGNAL_USR2 = 140
    EXIT_SIGNAL_PIPE = 141
    EXIT_SIGNAL_ALRM = 142
    EXIT_SIGNAL_TERM = 143


class SimplifiedMode(str, Enum):
    BASIC = "basic"
    SEVERITY = "severity"


@dataclass(frozen=True)
class ExitCodeInfo:
    """Catalog metadata for one exit code."""

    code: int
    name: str
    description: str
    category: str
    context: str = ""
    retry_hint: str = ""
    bsd_equivalent: str = ""
    simplified_basic: Optional[int] = None
    simplified_severity: Optional[int] = None

    @property
    def is_signal_code(self) -> bool:
        return SIGNAL_CODE_MIN <= self.code <= SIGNAL_CODE_MAX


@dataclass(frozen=True)
class SimplifiedCodeInfo:
    code: int
    name: str
    description: str
    maps_from: tuple[int, ...] = ()


@dataclass(frozen=True)
class SimplifiedModeInfo:
    id: str
    name: str
    description: str
    codes: tuple[SimplifiedCodeInfo, ...] = ()


@dataclass(frozen=True)
class BSDCodeInfo:
    code: int
    name: str
    description: str


# BSD sysexits.h
BSD_EXIT_CODES: dict[str, BSDCodeInfo] = {
    info.name: info
    for info in (
        BSDCodeInfo(0, "EX_OK", "Successful termination"),
        BSDCodeInfo(64, "EX_USAGE", "Command line usage error"),
        BSDCodeInfo(65, "EX_DATAERR", "Data format error"),
        BSDCodeInfo(66, "EX_NOINPUT", "Cannot open input"),
        BSDCodeInfo(67, "EX_NOUSER", "Addressee unknown"),
        BSDCodeInfo(68, "EX_NOHOST", "Host name unknown"),
        BSDCodeInfo(69, "EX_UNAVAILABLE", "Service unavailable"),
        BSDCodeInfo(70, "EX_SOFTWARE", "Internal software error"),
        BSDCodeInfo(71, "EX_OSERR", "System error (e.g., can't fork)"),
        BSDCodeInfo(72, "EX_OSFILE", "Critical OS file missing"),
        BSDCodeInfo(73, "EX_CANTCREAT", "Can't create (user) output file"),
        BSDCodeInfo(74, "EX_IOERR", "Input/output error"),
        BSDCodeInfo(75, "EX_TEMPFAIL", "Temporary failure; user is invited to retry"),
        BSDCodeInfo(76, "EX_PROTOCOL", "Remote error in protocol"),
        BSDCodeInfo(77, "EX_NOPERM", "Permission denied"),
        BSDCodeInfo(78, "EX_CONFIG", "Configuration error"),
    )
}

SIMPLIFIED_DESCRIPTIONS = {
    "SUCCESS": "Operation completed successfully",
    "ERROR": "General error or failure",
    "USAGE_ERROR": "Command usage error or invalid arguments",
    "USER_ERROR": "User input or argument error",
    "CONFIG_ERROR": "Configuration or validation error",
    "RUNTIME_ERROR": "Runtime operation error",
    "SYSTEM_ERROR": "System resource or permission error",
    "SECURITY_ERROR": "Security or authentication error",
    "TEST_FAILURE": "Test execution failure",
    "OBSERVABILITY_ERROR": "Observability infrastructure error",
}


# --- Catalog Loading ---


@dataclass(frozen=True)
class _ExitCodeCatalog:
    version: str
    by_code: dict[int, ExitCodeInfo]
    by_name: dict[str, ExitCodeInfo]
    modes: dict[str, SimplifiedModeInfo]


# --- Module State ---
_catalog: Optional[_ExitCodeCatalog] = None
_catalog_lock = threading.Lock()


def _parse_modes(raw_modes: list[dict[str, Any]]) -> dict[str, SimplifiedModeInfo]:
    modes: dict[str, SimplifiedModeInfo] = {}
    for raw in raw_modes:
        codes = tuple(
            SimplifiedCodeInfo(
                code=int(mapping["simplified_code"]),
                name=str(mapping["simplified_name"]),
                description=SIMPLIFIED_DESCRIPTIONS.get(
                    str(mapping["simplified_name"]), str(mapping["simplified_name"])
                ),
                maps_from=tuple(int(code) for code in mapping.get("maps_from") or []),
            )
            for mapping in raw.get("mappings") or []
        )
        modes[str(raw["id"])] = SimplifiedModeInfo(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            description=str(raw.get("description") or ""),
            codes=codes,
        )
    return modes


def _simplified_lookup(mode: Optional[SimplifiedModeInfo]) -> dict[int, int]:
    if mode is None:
        return {}
    return {source: entry.code for entry in mode.codes for source in entry.maps_from}


def _build_catalog(data: dict[str, Any]) -> _ExitCodeCatalog:
    modes = _parse_modes(data.get("simplified_modes") or [])
    basic = _simplified_lookup(modes.get(SimplifiedMode.BASIC.value))
    severity = _simplified_lookup(modes.get(SimplifiedMode.SEVERITY.value))

    by_code: dict[int, ExitCodeInfo] = {}
    by_name: dict[str, ExitCodeInfo] = {}
    for category in data["categories"]:
        for raw in category.get("codes") or []:
            code = int(raw["code"])
            info = ExitCodeInfo(
                code=code,
                name=str(raw["name"]),
                description=str(raw.get("description") or ""),
                category=str(category["id"]),
                context=str(raw.get("context") or ""),
                retry_hint=str(raw.get("retry_hint") or ""),
                bsd_equivalent=str(raw.get("bsd_equivalent") or ""),
                simplified_basic=basic.get(code),
                simplified_severity=severity.get(code),
            )
            if code in by_code or info.name in by_name:
                raise CatalogLoadError(EXIT_CODES_FILE, f"duplicate exit code {code} ({info.name})")
            by_code[code] = info
            by_name[info.name] = info

    return _ExitCodeCatalog(
        version=str(data.get("version", "")),
        by_code=by_code,
        by_name=by_name,
        modes=modes,
    )


def _load() -> _ExitCodeCatalog:
    global _catalog
    with _catalog_lock:
        if _catalog is None:
            data = load_asset(EXIT_CODES_FILE, "categories")
            try:
                _catalog = _build_catalog(data)
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogLoadError(EXIT_CODES_FILE, f"malformed exit code entry: {e}") from e
        return _catalog


# --- Lookups ---


def exit_codes_version() -> str:
    return _load().version


def get_exit_code_info(code: int) -> Optional[ExitCodeInfo]:
    return _load().by_code.get(int(code))


def get_exit_code_info_by_name(name: str) -> Optional[ExitCodeInfo]:
    """Look up a code by its symbolic name; the ``EXIT_`` prefix is optional."""
    key = name.strip().upper()
    if not key.startswith("EXIT_"):
        key = "EXIT_" + key
    return _load().by_name.get(key)


def list_exit_codes(include_signal_codes: bool = True) -> list[ExitCodeInfo]:
    """All catalog codes in ascending order.

    Args:
        include_signal_codes: Set False to drop the 128-165 signal range, e.g.
            on platforms without signal exit codes
    """
    return [
        info
        for code, info in sorted(_load().by_code.items())
        if include_signal_codes or not info.is_signal_code
    ]


# --- Simplified Modes ---


def map_to_simplified(code: int, mode: Union[SimplifiedMode, str]) -> Optional[int]:
    """Collapse ``code`` onto the simplified set of ``mode``.

    Returns:
        The simplified code, or None when the mode does not map ``code``

    Raises:
        ValueError: If ``mode`` is not a known mode
    """
    mode_info = _load().modes.get(SimplifiedMode(mode).value)
    return _simplified_lookup(mode_info).get(int(code))


def list_simplified_modes() -> list[SimplifiedMode]:
    return [mode for mode in SimplifiedMode if mode.value in _load().modes]


def get_simplified_mode_info(mode: Union[SimplifiedMode, str]) -> Optional[SimplifiedModeInfo]:
    return _load().modes.get(SimplifiedMode(mode).value)


# --- BSD Compatibility ---


def get_bsd_code_info(bsd_code: int) -> Optional[BSDCodeInfo]:
    for info in BSD_EXIT_CODES.values():
        if info.code == bsd_code:
            return info
    return None


def map_to_bsd(code: int) -> Optional[int]:
    """Return the BSD sysexits code equivalent to a catalog code, if any."""
    info = get_exit_code_info(code)
    if info is None or not info.bsd_equivalent:
        return None
    bsd = BSD_EXIT_CODES.get(info.bsd_equivalent)
    return bsd.code if bsd else None


def map_from_bsd(bsd_code: int) -> Optional[int]:
    """Return the lowest catalog code whose BSD equivalent is ``bsd_code``."""
    bsd = get_bsd_code_info(bsd_code)
    if bsd is None:
        return None
    for code, info in sorted(_load().by_code.items()):
        if info.bsd_equivalent == bsd.name:
            return code
    return None


def reset_exit_code_catalog() -> None:
    """Drop the loaded catalog so the next lookup re-reads the asset."""
    global _catalog
    with _catalog_lock:
        _catalog = None
