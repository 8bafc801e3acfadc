"""Structured validation diagnostics."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, Iterator

from jsonschema.exceptions import ValidationError

SOURCE_PYFULMEN = "pyfulmen"


class Severity(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Attributes:
        pointer: JSON Pointer (RFC 6901) to the offending instance location, "" for the root
        keyword: Schema keyword that produced the finding, e.g. "required"
        message: Human readable description
        severity: ERROR or WARN
        source: Which validator emitted the finding
    """

    pointer: str
    keyword: str
    message: str
    severity: Severity = Severity.ERROR
    source: str = SOURCE_PYFULMEN

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


def json_pointer(path: Iterable) -> str:
    """Build an RFC 6901 pointer from path segments."""
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in path)


def diagnostics_from_errors(
    errors: Iterable[ValidationError],
    source: str = SOURCE_PYFULMEN,
) -> list[Diagnostic]:
    """Flatten jsonschema errors into diagnostics.

    Each error and every nested cause (``error.context``) yields one diagnostic,
    in pre-order depth-first order.
    """
    return list(_walk_errors(errors, source))


def _walk_errors(errors: Iterable[ValidationError], source: str) -> Iterator[Diagnostic]:
    for error in errors:
        yield Diagnostic(
            pointer=json_pointer(error.absolute_path),
            keyword=str(error.validator) if error.validator is not None else "",
            message=error.message,
            severity=Severity.ERROR,
            source=source,
        )
        if error.context:
            yield from _walk_errors(error.context, source)


def diagnostics_to_messages(diagnostics: Iterable[Diagnostic]) -> list[str]:
    return [diagnostic.message for diagnostic in diagnostics]


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic as a single CLI-friendly line."""
    location = diagnostic.pointer or "/"
    return f"[{diagnostic.severity}] {location} ({diagnostic.keyword}): {diagnostic.message}"
