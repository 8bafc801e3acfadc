"""ISO 3166-1 country records and validated country codes."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pyfulmen.foundry.catalog import FoundryCatalog


@dataclass(frozen=True)
class Country:
    alpha2: str
    alpha3: str
    numeric: str
    name: str
    official_name: str = ""


def normalize_numeric(code: str) -> str:
    """Zero-pad a numeric country code to three digits."""
    return code.strip().zfill(3)


def _lookup(code: str, catalog: "FoundryCatalog") -> Optional[Country]:
    code = code.strip()
    if code.isdigit():
        return catalog.get_country_by_numeric(code)
    if len(code) == 2:
        return catalog.get_country(code)
    if len(code) == 3:
        return catalog.get_country_by_alpha3(code)
    return None


def validate_country_code(code: str, catalog: Optional["FoundryCatalog"] = None) -> bool:
    """Report whether ``code`` is a known alpha-2, alpha-3 or numeric code."""
    from pyfulmen.foundry.catalog import default_catalog

    return bool(code.strip()) and _lookup(code, catalog or default_catalog()) is not None


@dataclass(frozen=True)
class CountryCode:
    """A validated country code in canonical form.

    Alpha codes are uppercased and numeric codes are zero padded, so
    ``CountryCode.new("us")`` and ``CountryCode.new("US")`` are equal.
    """

    value: str

    @classmethod
    def new(cls, code: str, catalog: Optional["FoundryCatalog"] = None) -> "CountryCode":
        """Validate and canonicalize ``code``.

        Raises:
            ValueError: If the code is empty or not in the catalog
        """
        from pyfulmen.foundry.catalog import default_catalog

        trimmed = code.strip()
        if not trimmed:
            raise ValueError("country code cannot be empty")
        if _lookup(trimmed, catalog or default_catalog()) is None:
            raise ValueError(f"invalid country code: {code}")

        canonical = normalize_numeric(trimmed) if trimmed.isdigit() else trimmed.upper()
        return cls(canonical)

    def country(self, catalog: Optional["FoundryCatalog"] = None) -> Optional[Country]:
        from pyfulmen.foundry.catalog import default_catalog

        return _lookup(self.value, catalog or default_catalog())

    def __str__(self) -> str:
        return self.value
