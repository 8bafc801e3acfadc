"""Foundry reference catalogs: patterns, MIME types, HTTP statuses and countries.

Each catalog is a YAML asset bundled under ``pyfulmen/data/foundry``. Assets are
loaded on first access, once per catalog instance, and are read-only afterwards.

    from pyfulmen.foundry.catalog import default_catalog

    catalog = default_catalog()
    catalog.get_mime_type_by_extension(".json").mime   # "application/json"
    catalog.get_country("us").name                     # "United States"
"""

import threading
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger

from pyfulmen.foundry.country import Country, normalize_numeric
from pyfulmen.foundry.errors import CatalogLoadError
from pyfulmen.foundry.http_status import HTTPStatusCode, HTTPStatusGroup, HTTPStatusHelper
from pyfulmen.foundry.mime import MimeType
from pyfulmen.foundry.patterns import Pattern

FOUNDRY_DATA_DIR = Path(__file__).parent.parent / "data" / "foundry"

PATTERNS_FILE = "patterns.yaml"
MIME_TYPES_FILE = "mime-types.yaml"
HTTP_STATUSES_FILE = "http-statuses.yaml"
COUNTRY_CODES_FILE = "country-codes.yaml"
EXIT_CODES_FILE = "exit-codes.yaml"
SIGNALS_FILE = "signals.yaml"


def load_asset(
    filename: str, collection: str, data_dir: Optional[Path] = None
) -> dict[str, Any]:
    """Read a catalog asset and check that it holds the ``collection`` list.

    Raises:
        CatalogLoadError: If the file is missing, unparsable or mis-shaped
    """
    path = (data_dir or FOUNDRY_DATA_DIR) / filename
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogLoadError(filename, f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogLoadError(filename, f"invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get(collection), list):
        raise CatalogLoadError(filename, f"{path} has no {collection!r} list")

    logger.debug("Loaded foundry asset", asset=filename, entries=len(data[collection]))
    return data


class FoundryCatalog:
    """Lazily loaded reference catalogs.

    Lookups that miss return None. A missing or malformed asset raises
    CatalogLoadError on the first lookup that needs it.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else FOUNDRY_DATA_DIR
        self._lock = threading.RLock()

        self._patterns: Optional[dict[str, Pattern]] = None
        self._mime_types: Optional[dict[str, MimeType]] = None
        self._http_groups: Optional[dict[str, HTTPStatusGroup]] = None
        self._http_helper: Optional[HTTPStatusHelper] = None
        self._countries: Optional[dict[str, Country]] = None
        self._countries_alpha3: dict[str, Country] = {}
        self._countries_numeric: dict[str, Country] = {}

    def _entries(self, filename: str, collection: str) -> list[Any]:
        return load_asset(filename, collection, self.data_dir)[collection]

    # --- Patterns ---

    def _load_patterns(self) -> dict[str, Pattern]:
        with self._lock:
            if self._patterns is None:
                try:
                    patterns = [Pattern.from_dict(p) for p in self._entries(PATTERNS_FILE, "patterns")]
                except (KeyError, TypeError, ValueError) as e:
                    raise CatalogLoadError(PATTERNS_FILE, f"malformed pattern entry: {e}") from e
                self._patterns = {pattern.id: pattern for pattern in patterns}
            return self._patterns

    def get_pattern(self, pattern_id: str) -> Optional[Pattern]:
        return self._load_patterns().get(pattern_id)

    def get_all_patterns(self) -> list[Pattern]:
        return sorted(self._load_patterns().values(), key=lambda p: p.id)

    # --- MIME Types ---

    def _load_mime_types(self) -> dict[str, MimeType]:
        with self._lock:
            if self._mime_types is None:
                try:
                    mime_types = [
                        MimeType(
                            id=str(entry["id"]),
                            mime=str(entry["mime"]),
                            name=str(entry.get("name", entry["id"])),
                            extensions=[str(ext) for ext in entry.get("extensions") or []],
                            description=str(entry.get("description") or ""),
                        )
                        for entry in self._entries(MIME_TYPES_FILE, "types")
                    ]
                except (KeyError, TypeError) as e:
                    raise CatalogLoadError(MIME_TYPES_FILE, f"malformed MIME entry: {e}") from e
                self._mime_types = {mime_type.id: mime_type for mime_type in mime_types}
            return self._mime_types

    def get_mime_type(self, mime_id: str) -> Optional[MimeType]:
        return self._load_mime_types().get(mime_id)

    def get_mime_type_by_extension(self, ext: str) -> Optional[MimeType]:
        for mime_type in self.get_all_mime_types():
            if mime_type.matches_extension(ext):
                return mime_type
        return None

    def get_all_mime_types(self) -> list[MimeType]:
        return sorted(self._load_mime_types().values(), key=lambda m: m.id)

    # --- HTTP Status ---

    def _load_http_groups(self) -> dict[str, HTTPStatusGroup]:
        with self._lock:
            if self._http_groups is None:
                try:
                    groups = [
                        HTTPStatusGroup(
                            id=str(entry["id"]),
                            name=str(entry.get("name", entry["id"])),
                            description=str(entry.get("description") or ""),
                            codes=[
                                HTTPStatusCode(int(code["value"]), str(code["reason"]))
                                for code in entry.get("codes") or []
                            ],
                        )
                        for entry in self._entries(HTTP_STATUSES_FILE, "groups")
                    ]
                except (KeyError, TypeError, ValueError) as e:
                    raise CatalogLoadError(HTTP_STATUSES_FILE, f"malformed status group: {e}") from e

                seen: dict[int, str] = {}
                for group in groups:
                    for status in group.codes:
                        if status.value in seen:
                            raise CatalogLoadError(
                                HTTP_STATUSES_FILE,
                                f"code {status.value} is in both {seen[status.value]!r} "
                                f"and {group.id!r}",
                            )
                        seen[status.value] = group.id

                self._http_groups = {group.id: group for group in groups}
                self._http_helper = HTTPStatusHelper(groups)
            return self._http_groups

    def get_http_status_group(self, group_id: str) -> Optional[HTTPStatusGroup]:
        return self._load_http_groups().get(group_id)

    def get_http_status_group_for_code(self, code: int) -> Optional[HTTPStatusGroup]:
        return self.get_http_status_helper().group(code)

    def get_all_http_status_groups(self) -> list[HTTPStatusGroup]:
        return list(self._load_http_groups().values())

    def get_http_status_helper(self) -> HTTPStatusHelper:
        self._load_http_groups()
        return self._http_helper

    # --- Countries ---

    def _load_countries(self) -> dict[str, Country]:
        with self._lock:
            if self._countries is None:
                try:
                    countries = [
                        Country(
                            alpha2=str(entry["alpha2"]).upper(),
                            alpha3=str(entry["alpha3"]).upper(),
                            numeric=normalize_numeric(str(entry["numeric"])),
                            name=str(entry["name"]),
                            official_name=str(entry.get("officialName") or entry["name"]),
                        )
                        for entry in self._entries(COUNTRY_CODES_FILE, "countries")
                    ]
                except (KeyError, TypeError) as e:
                    raise CatalogLoadError(COUNTRY_CODES_FILE, f"malformed country entry: {e}") from e

                self._countries_alpha3 = {c.alpha3: c for c in countries}
                self._countries_numeric = {c.numeric: c for c in countries}
                self._countries = {c.alpha2: c for c in countries}
            return self._countries

    def get_country(self, alpha2: str) -> Optional[Country]:
        return self._load_countries().get(alpha2.strip().upper())

    def get_country_by_alpha3(self, alpha3: str) -> Optional[Country]:
        self._load_countries()
        return self._countries_alpha3.get(alpha3.strip().upper())

    def get_country_by_numeric(self, numeric: str) -> Optional[Country]:
        self._load_countries()
        return self._countries_numeric.get(normalize_numeric(str(numeric)))

    def list_countries(self) -> list[Country]:
        return sorted(self._load_countries().values(), key=lambda c: c.alpha2)


# --- Module State ---
_default_catalog: Optional[FoundryCatalog] = None
_default_lock = threading.Lock()


def default_catalog() -> FoundryCatalog:
    """Return the process-wide catalog over the bundled assets."""
    global _default_catalog
    with _default_lock:
        if _default_catalog is None:
            _default_catalog = FoundryCatalog()
        return _default_catalog


def reset_default_catalog() -> None:
    global _default_catalog
    with _default_lock:
        _default_catalog = None
