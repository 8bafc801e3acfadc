"""Correlation IDs for tracing a request across services.

Correlation IDs are UUIDv7 values in lowercase hyphenated form, so they sort by
creation time. The ID for the current task lives in a context variable, which
keeps concurrent requests isolated under asyncio and threads alike.

    with with_correlation_id(generate_correlation_id()):
        logger.info("handling request", correlation_id=get_correlation_id())
"""

import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union

from uuid6 import uuid7

from pyfulmen.foundry.errors import InvalidCorrelationIDError

CORRELATION_ID_HEADER = "X-Correlation-ID"

_HYPHENATED_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

_correlation_id: ContextVar[Optional[str]] = ContextVar("pyfulmen_correlation_id", default=None)


def generate_correlation_id() -> str:
    """Return a new lowercase UUIDv7 string."""
    return str(uuid7())


def parse_correlation_id(value: str) -> uuid.UUID:
    """Parse a hyphenated UUIDv7.

    Raises:
        InvalidCorrelationIDError: If ``value`` is not a hyphenated UUID or its
            version is not 7
    """
    if not isinstance(value, str) or not _HYPHENATED_UUID.match(value.strip()):
        raise InvalidCorrelationIDError(f"invalid correlation ID: {value!r}")

    parsed = uuid.UUID(value.strip())
    if parsed.version != 7 or parsed.variant != uuid.RFC_4122:
        raise InvalidCorrelationIDError(
            f"correlation ID must be a UUIDv7, got version {parsed.version}: {value!r}"
        )
    return parsed


def is_valid_correlation_id(value: str) -> bool:
    try:
        parse_correlation_id(value)
    except InvalidCorrelationIDError:
        return False
    return True


class CorrelationID:
    """A validated correlation ID value."""

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, uuid.UUID]):
        self._value = str(parse_correlation_id(str(value)))

    @classmethod
    def new(cls) -> "CorrelationID":
        return cls(generate_correlation_id())

    @classmethod
    def parse(cls, value: str) -> "CorrelationID":
        return cls(value)

    @staticmethod
    def validate(value: str) -> None:
        """Raise InvalidCorrelationIDError unless ``value`` is a UUIDv7."""
        parse_correlation_id(value)

    @staticmethod
    def is_valid(value: str) -> bool:
        return is_valid_correlation_id(value)

    def uuid(self) -> uuid.UUID:
        return uuid.UUID(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"CorrelationID({self._value!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, CorrelationID):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


# --- Context ---


@contextmanager
def with_correlation_id(value: Union[str, CorrelationID]) -> Iterator[str]:
    """Bind ``value`` as the current correlation ID for the enclosed block."""
    correlation_id = str(value)
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


def set_correlation_id(value: Union[str, CorrelationID]):
    """Bind ``value`` without a block; returns the token for ``reset_correlation_id``."""
    return _correlation_id.set(str(value))


def reset_correlation_id(token) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def require_correlation_id() -> str:
    """Return the current correlation ID.

    Raises:
        LookupError: If no correlation ID is bound in this context
    """
    value = _correlation_id.get()
    if value is None:
        raise LookupError("no correlation ID in the current context")
    return value
