"""MIME type descriptors and content sniffing.

Detection looks at the first bytes of a payload only and recognizes the
formats Fulmen tooling exchanges most often:

  JSON        starts with ``{`` or ``[`` and shows JSON punctuation early on
  XML         starts with ``<?xml``
  YAML        ``key: value`` structure near the top
  CSV         first line holds at least two commas
  plain text  mostly printable bytes

Anything else is reported as unknown (``None``).
"""

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Optional, Union

from loguru import logger

from pyfulmen import telemetry

if TYPE_CHECKING:
    from pyfulmen.foundry.catalog import FoundryCatalog

DEFAULT_SNIFF_BYTES = 512

_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")
_WHITESPACE = b" \t\r\n"


@dataclass
class MimeType:
    """A MIME type and the file extensions that carry it.

    The first extension is the canonical one.
    """

    id: str
    mime: str
    name: str
    extensions: list[str] = field(default_factory=list)
    description: str = ""

    def matches_extension(self, ext: str) -> bool:
        ext = ext.lstrip(".").lower()
        return any(candidate.lower() == ext for candidate in self.extensions)

    def matches_filename(self, filename: str) -> bool:
        suffix = Path(filename).suffix
        return bool(suffix) and self.matches_extension(suffix)

    def primary_extension(self) -> Optional[str]:
        return self.extensions[0] if self.extensions else None


# --- Detection ---


def _trim(data: bytes) -> bytes:
    for bom in _BOMS:
        if data.startswith(bom):
            data = data[len(bom) :]
            break
    return data.strip(_WHITESPACE)


def _looks_like_json(content: bytes) -> bool:
    if not content or content[:1] not in (b"{", b"["):
        return False
    head = content[:50]
    return any(marker in head for marker in (b"{", b"[", b'"', b":"))


def _looks_like_xml(content: bytes) -> bool:
    return len(content) > 5 and content.startswith(b"<?xml")


def _looks_like_yaml(content: bytes) -> bool:
    if not content or content[:1] in (b"{", b"[", b"<"):
        return False
    head = content[:200]
    return b": " in head or b":\n" in head


def _looks_like_csv(raw: bytes) -> bool:
    first_line = raw[:200].split(b"\n", 1)[0]
    return first_line.count(b",") >= 2


def _looks_like_text(content: bytes) -> bool:
    sample = content[:DEFAULT_SNIFF_BYTES]
    if not sample:
        return False
    printable = sum(1 for byte in sample if 32 <= byte <= 126 or byte in (9, 10, 13) or byte >= 128)
    return printable / len(sample) > 0.8


def _detect_id(data: bytes) -> Optional[str]:
    content = _trim(data)
    if not content:
        return None
    if _looks_like_json(content):
        return "json"
    if _looks_like_xml(content):
        return "xml"
    if _looks_like_yaml(content):
        return "yaml"
    if _looks_like_csv(data):
        return "csv"
    if _looks_like_text(content):
        return "plain-text"
    return None


def detect_mime_type(
    data: Union[bytes, str], catalog: Optional["FoundryCatalog"] = None
) -> Optional[MimeType]:
    """Sniff the MIME type of ``data``.

    Returns:
        The catalog descriptor, or None when the content is not recognized
    """
    from pyfulmen.foundry.catalog import default_catalog

    if isinstance(data, str):
        data = data.encode("utf-8")

    detected_id = _detect_id(data)
    mime_type = (catalog or default_catalog()).get_mime_type(detected_id) if detected_id else None

    telemetry.emit_counter(
        "foundry.mime.detections",
        1,
        {"mime_type": mime_type.mime if mime_type else "unknown"},
    )
    logger.trace("MIME detection", detected=detected_id, size=len(data))
    return mime_type


class ReplayReader(io.RawIOBase):
    """Binary stream that yields a sniffed prefix, then the rest of the source."""

    def __init__(self, prefix: bytes, source: BinaryIO):
        self._prefix = prefix
        self._source = source

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._prefix:
            count = min(len(buffer), len(self._prefix))
            buffer[:count] = self._prefix[:count]
            self._prefix = self._prefix[count:]
            return count
        chunk = self._source.read(len(buffer))
        if not chunk:
            return 0
        buffer[: len(chunk)] = chunk
        return len(chunk)


def detect_mime_type_from_reader(
    stream: BinaryIO,
    max_bytes: int = DEFAULT_SNIFF_BYTES,
    catalog: Optional["FoundryCatalog"] = None,
) -> tuple[Optional[MimeType], io.BufferedReader]:
    """Sniff the head of ``stream`` without losing it.

    Returns:
        The detected type and a replay stream that yields the full content,
        starting with the bytes consumed for detection
    """
    if max_bytes <= 0:
        max_bytes = DEFAULT_SNIFF_BYTES
    head = stream.read(max_bytes) or b""
    replay = io.BufferedReader(ReplayReader(head, stream))
    return detect_mime_type(head, catalog), replay


def detect_mime_type_from_file(
    path: Union[str, Path], catalog: Optional["FoundryCatalog"] = None
) -> Optional[MimeType]:
    """Sniff the MIME type of the file at ``path`` from its first bytes."""
    with open(path, "rb") as f:
        head = f.read(DEFAULT_SNIFF_BYTES)
    return detect_mime_type(head, catalog)


def is_supported_mime_type(mime: str, catalog: Optional["FoundryCatalog"] = None) -> bool:
    """Report whether ``mime`` (e.g. ``application/json``) is a catalog type."""
    from pyfulmen.foundry.catalog import default_catalog

    wanted = mime.strip().lower()
    return any(
        mime_type.mime.lower() == wanted
        for mime_type in (catalog or default_catalog()).get_all_mime_types()
    )
