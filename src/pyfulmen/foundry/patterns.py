"""Shared regex, glob and literal patterns."""

import fnmatch
import re
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pyfulmen.foundry.errors import PatternError


class PatternKind(str, Enum):
    REGEX = "regex"
    GLOB = "glob"
    LITERAL = "literal"


# Flag names in the catalog's per-language "python" block
_PYTHON_FLAGS = {
    "ignoreCase": re.IGNORECASE,
    "multiline": re.MULTILINE,
    "dotall": re.DOTALL,
    "unicode": re.UNICODE,
    "verbose": re.VERBOSE,
}


@dataclass
class Pattern:
    """A catalog pattern.

    Regex patterns are compiled on first use and the compiled expression is
    cached on the instance. ``flags`` maps a language tag (``go``, ``python``,
    ``typescript``...) to that language's flag switches; only the ``python``
    entry affects matching here.
    """

    id: str
    name: str
    kind: PatternKind
    pattern: str
    description: str = ""
    examples: list[str] = field(default_factory=list)
    non_examples: list[str] = field(default_factory=list)
    flags: dict[str, dict[str, bool]] = field(default_factory=dict)

    def __post_init__(self):
        self.kind = PatternKind(self.kind)
        self._compiled: Optional[re.Pattern] = None
        self._compile_lock = threading.Lock()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pattern":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            kind=PatternKind(data["kind"]),
            pattern=str(data["pattern"]),
            description=str(data.get("description") or ""),
            examples=[str(example) for example in data.get("examples") or []],
            non_examples=[str(example) for example in data.get("non_examples") or []],
            flags={
                str(language): {str(k): bool(v) for k, v in (switches or {}).items()}
                for language, switches in (data.get("flags") or {}).items()
            },
        )

    def python_flags(self) -> int:
        result = 0
        for name, enabled in self.flags.get("python", {}).items():
            if enabled and name in _PYTHON_FLAGS:
                result |= _PYTHON_FLAGS[name]
        return result

    def compiled_regex(self) -> re.Pattern:
        """Return the compiled expression for a regex pattern.

        Raises:
            PatternError: If the pattern is not a regex or does not compile
        """
        if self.kind is not PatternKind.REGEX:
            raise PatternError(f"pattern {self.id!r} is a {self.kind.value} pattern, not a regex")

        with self._compile_lock:
            if self._compiled is None:
                try:
                    self._compiled = re.compile(self.pattern, self.python_flags())
                except re.error as e:
                    raise PatternError(f"pattern {self.id!r} does not compile: {e}") from e
            return self._compiled

    def match(self, value: str) -> bool:
        """Test ``value`` against the pattern.

        Regex patterns search anywhere in the value (anchor the expression to
        require a full match), globs use case-sensitive shell matching and
        literals compare for equality.
        """
        if self.kind is PatternKind.REGEX:
            return self.compiled_regex().search(value) is not None
        if self.kind is PatternKind.GLOB:
            return fnmatch.fnmatchcase(value, self.pattern)
        return value == self.pattern

    def search(self, value: str) -> bool:
        """Report whether the pattern occurs somewhere in ``value``.

        An empty regex match does not count as found.
        """
        if self.kind is PatternKind.REGEX:
            return any(found.group(0) for found in self.compiled_regex().finditer(value))
        if self.kind is PatternKind.GLOB:
            return fnmatch.fnmatchcase(value, self.pattern)
        return self.pattern in value

    def describe(self) -> str:
        lines = [f"{self.name} ({self.id})", f"Pattern: {self.pattern}"]
        if self.description:
            lines.append(f"Description: {self.description}")
        text = "\n".join(lines) + "\n"
        if self.examples:
            text += "\nValid examples:\n" + "".join(f"  - {e}\n" for e in self.examples)
        if self.non_examples:
            text += "\nInvalid examples:\n" + "".join(f"  - {e}\n" for e in self.non_examples)
        return text
