"""Language profiles for segmentation and selection.

Each profile keeps the per-language tables in one place: which marks end
a sentence on each side, how the user picks targets (clickable words or
dragged substrings), and which Tesseract language pack reads the image.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clozepair.exceptions import ConfigurationError
from clozepair.models import LanguageMode


class SelectionGranularity(str, Enum):
    """How selection targets are identified within a text."""

    WORD = "word"  # (word, ordinal index) pairs
    PHRASE = "phrase"  # literal substrings


@dataclass(frozen=True)
class LanguageProfile:
    """Configuration for one source language.

    Attributes:
        mode: LanguageMode this profile serves.
        name: Human-readable language pair.
        description: What the profile expects from the OCR text.
        ocr_language: Tesseract language code(s) for the screenshot.
        source_delimiters: Characters ending a source sentence.
        translation_delimiters: Characters ending the English translation.
        granularity: Selection granularity for both fields of a pair.
    """

    mode: LanguageMode
    name: str
    description: str
    ocr_language: str
    source_delimiters: str
    translation_delimiters: str
    granularity: SelectionGranularity


SPANISH_PROFILE = LanguageProfile(
    mode=LanguageMode.SPANISH,
    name="Spanish → English",
    description="Space-delimited source; sentences split on terminal punctuation counts",
    ocr_language="spa+eng",
    source_delimiters=".!?",
    translation_delimiters=".!?",
    granularity=SelectionGranularity.WORD,
)

JAPANESE_PROFILE = LanguageProfile(
    mode=LanguageMode.JAPANESE,
    name="Japanese → English",
    description="Unspaced source ending in a native full stop, then an English sentence",
    ocr_language="jpn+eng",
    source_delimiters="。！？",
    translation_delimiters=".!?",
    granularity=SelectionGranularity.PHRASE,
)


PROFILES: dict[LanguageMode, LanguageProfile] = {
    LanguageMode.SPANISH: SPANISH_PROFILE,
    LanguageMode.JAPANESE: JAPANESE_PROFILE,
}


def get_profile(mode: LanguageMode | str) -> LanguageProfile:
    """Get the profile for a language mode.

    Args:
        mode: LanguageMode or its string value ("spa", "jpn").

    Returns:
        The matching LanguageProfile.

    Raises:
        ConfigurationError: If the mode is not supported.
    """
    try:
        return PROFILES[LanguageMode(mode)]
    except (KeyError, ValueError) as e:
        valid = tuple(m.value for m in PROFILES)
        raise ConfigurationError(f"Unsupported language {mode!r}. Supported: {valid}") from e
