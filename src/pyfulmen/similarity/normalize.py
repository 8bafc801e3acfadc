"""Unicode-aware text normalization for similarity comparisons.

The pipeline applied by ``normalize`` runs in a fixed order:

  1. trim leading/trailing space, tab, CR and LF
  2. case fold (Turkish dotted/dotless I rules when locale is "tr")
  3. optionally strip accents (NFD, drop combining marks, NFC)
"""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

TRIM_CHARACTERS = " \t\r\n"

TURKISH_LOCALES = frozenset({"tr", "TR", "tr-TR", "tr_TR"})


@dataclass(frozen=True)
class NormalizeOptions:
    """Options for ``normalize``.

    Attributes:
        strip_accents: Remove combining marks after case folding
        locale: Optional locale tag; only Turkish changes behavior
    """

    strip_accents: bool = False
    locale: Optional[str] = None


def normalize(value: str, options: Optional[NormalizeOptions] = None) -> str:
    """Trim, case fold and optionally strip accents from ``value``."""
    opts = options or NormalizeOptions()
    result = value.strip(TRIM_CHARACTERS)
    result = casefold(result, opts.locale or "")
    if opts.strip_accents:
        result = strip_accents(result)
    return result


def casefold(value: str, locale: str = "") -> str:
    """Unicode case folding with the Turkish locale special case.

    For Turkish, İ (U+0130) folds to i and I folds to dotless ı (U+0131);
    every other character is lowercased normally.
    """
    if locale in TURKISH_LOCALES:
        return _turkish_casefold(value)
    return value.casefold()


def _turkish_casefold(value: str) -> str:
    folded = []
    for char in value:
        if char == "İ":
            folded.append("i")
        elif char == "I":
            folded.append("ı")
        else:
            folded.append(char.lower())
    return "".join(folded)


def strip_accents(value: str) -> str:
    """Remove nonspacing combining marks (category Mn) from ``value``."""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def equals_ignore_case(a: str, b: str, options: Optional[NormalizeOptions] = None) -> bool:
    """Compare two strings after normalizing both with the same options."""
    return normalize(a, options) == normalize(b, options)


# --- Presets ---


class NormalizationPreset(str, Enum):
    """Named normalization levels shared with the fixture corpus."""

    NONE = "none"
    MINIMAL = "minimal"
    DEFAULT = "default"
    AGGRESSIVE = "aggressive"


def apply_preset(value: str, preset: Union[NormalizationPreset, str]) -> str:
    """Normalize ``value`` according to a named preset.

      none        identity
      minimal     NFC + trim
      default     NFC + case fold + trim
      aggressive  NFKD + case fold + strip accents + remove punctuation + trim

    Raises:
        ValueError: If the preset is unknown
    """
    preset = NormalizationPreset(preset)

    if preset is NormalizationPreset.NONE:
        return value
    if preset is NormalizationPreset.MINIMAL:
        return unicodedata.normalize("NFC", value).strip(TRIM_CHARACTERS)
    if preset is NormalizationPreset.DEFAULT:
        return unicodedata.normalize("NFC", value).casefold().strip(TRIM_CHARACTERS)

    result = unicodedata.normalize("NFKD", value).casefold()
    result = "".join(
        char
        for char in result
        if unicodedata.category(char) != "Mn" and not unicodedata.category(char).startswith("P")
    )
    return unicodedata.normalize("NFC", result).strip(TRIM_CHARACTERS)
