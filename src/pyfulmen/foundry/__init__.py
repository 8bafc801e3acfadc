"""Foundry: immutable reference catalogs and identifiers for Fulmen applications."""

from pyfulmen.foundry.catalog import FoundryCatalog, default_catalog
from pyfulmen.foundry.correlation import (
    CORRELATION_ID_HEADER,
    CorrelationID,
    generate_correlation_id,
    get_correlation_id,
    is_valid_correlation_id,
    parse_correlation_id,
    require_correlation_id,
    with_correlation_id,
)
from pyfulmen.foundry.country import Country, CountryCode, validate_country_code
from pyfulmen.foundry.errors import (
    CatalogLoadError,
    FoundryError,
    InvalidCorrelationIDError,
    PatternError,
    SignalNotFoundError,
)
from pyfulmen.foundry.exit_codes import (
    ExitCode,
    ExitCodeInfo,
    SimplifiedMode,
    exit_codes_version,
    get_bsd_code_info,
    get_exit_code_info,
    get_exit_code_info_by_name,
    get_simplified_mode_info,
    list_exit_codes,
    list_simplified_modes,
    map_from_bsd,
    map_to_bsd,
    map_to_simplified,
)
from pyfulmen.foundry.http_status import HTTPStatusGroup, HTTPStatusHelper
from pyfulmen.foundry.mime import (
    MimeType,
    detect_mime_type,
    detect_mime_type_from_file,
    detect_mime_type_from_reader,
    is_supported_mime_type,
)
from pyfulmen.foundry.patterns import Pattern, PatternKind
from pyfulmen.foundry.platform import platform_info, supports_signal_exit_codes
from pyfulmen.foundry.signals import (
    SignalCatalog,
    SignalDefinition,
    WindowsFallback,
    default_signal_catalog,
)
from pyfulmen.foundry.timestamp import TimestampRFC3339Nano

__all__ = [
    # Catalog
    "FoundryCatalog",
    "default_catalog",
    # Correlation
    "CORRELATION_ID_HEADER",
    "CorrelationID",
    "generate_correlation_id",
    "get_correlation_id",
    "is_valid_correlation_id",
    "parse_correlation_id",
    "require_correlation_id",
    "with_correlation_id",
    # Countries
    "Country",
    "CountryCode",
    "validate_country_code",
    # Errors
    "CatalogLoadError",
    "FoundryError",
    "InvalidCorrelationIDError",
    "PatternError",
    "SignalNotFoundError",
    # Exit codes
    "ExitCode",
    "ExitCodeInfo",
    "SimplifiedMode",
    "exit_codes_version",
    "get_bsd_code_info",
    "get_exit_code_info",
    "get_exit_code_info_by_name",
    "get_simplified_mode_info",
    "list_exit_codes",
    "list_simplified_modes",
    "map_from_bsd",
    "map_to_bsd",
    "map_to_simplified",
    # HTTP status
    "HTTPStatusGroup",
    "HTTPStatusHelper",
    # MIME
    "MimeType",
    "detect_mime_type",
    "detect_mime_type_from_file",
    "detect_mime_type_from_reader",
    "is_supported_mime_type",
    # Patterns
    "Pattern",
    "PatternKind",
    # Platform
    "platform_info",
    "supports_signal_exit_codes",
    # Signals
    "SignalCatalog",
    "SignalDefinition",
    "WindowsFallback",
    "default_signal_catalog",
    # Timestamp
    "TimestampRFC3339Nano",
]
