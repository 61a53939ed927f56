"""
Sentence-pair segmentation for OCR text.

A flashcard screenshot holds exactly one source sentence followed by its
English translation, but OCR gives back a flat run of lines with no
marker between the two. The segmenters below recover the split from
sentence-ending punctuation, one strategy per source language:

- SpaceDelimitedSegmenter (Spanish): counts terminal marks and picks the
  boundary by a tiered policy (see split()).
- UnspacedSourceSegmenter (Japanese): takes the first run ending in a
  native full stop as the source and the next English sentence as the
  translation.

Segmentation never raises on bad input: it returns a SegmentResult whose
failure_reason says why, with empty source and translation text.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from clozepair.languages import LanguageProfile, get_profile
from clozepair.models import LanguageMode, SegmentResult, TextField
from clozepair.normalizers.noise import correct

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

WHITESPACE_RUN = re.compile(r"\s+")

# Ornamental brackets around Japanese prompts; never sentence content
DECORATIVE_BRACKETS = str.maketrans("", "", "【】〖〗")

# OCR reads full-width marks as ASCII after Japanese text
WESTERN_MARK_AFTER_NATIVE = re.compile(r"(?<=[^\x00-\x7F])[!?]")
WESTERN_TO_NATIVE = str.maketrans({"!": "！", "?": "？"})
NATIVE_TO_WESTERN = str.maketrans({"！": "!", "？": "?", "。": ".", "．": "."})


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (newlines included) to single spaces."""
    return WHITESPACE_RUN.sub(" ", text).strip()


# =============================================================================
# SEGMENTERS
# =============================================================================


class Segmenter(ABC):
    """
    Splits OCR text into a source sentence and its translation.

    Subclasses implement split() on raw text; segment() adds noise
    correction of both fields and logging.

    Attributes:
        profile: LanguageProfile with the delimiter tables.
        correct_noise: Whether to run the noise corrector on both fields.
    """

    mode: LanguageMode

    def __init__(self, correct_noise: bool = True):
        self.profile: LanguageProfile = get_profile(self.mode)
        self.correct_noise = correct_noise

    @abstractmethod
    def split(self, raw_text: str) -> SegmentResult:
        """Split raw OCR text; no noise correction."""

    def segment(self, raw_text: str) -> SegmentResult:
        """
        Split raw OCR text into source and translation.

        Args:
            raw_text: Newline-joined OCR lines for one image.

        Returns:
            SegmentResult; on failure both texts are empty and
            failure_reason is set.
        """
        result = self.split(raw_text)
        if not result.succeeded:
            logger.debug("Segmentation failed (%s): %s", self.mode.value, result.failure_reason)
            return result

        source = result.source_text
        translation = result.translation_text
        if self.correct_noise:
            source = correct(source, self.mode, TextField.SOURCE)
            translation = correct(translation, self.mode, TextField.TRANSLATION)

        if not source:
            return SegmentResult.failed("source text empty after cleanup")
        if not translation:
            return SegmentResult.failed("translation text empty after cleanup")

        logger.debug("Segmented %r | %r", source, translation)
        return SegmentResult(source_text=source, translation_text=translation)


class SpaceDelimitedSegmenter(Segmenter):
    """Segmenter for space-delimited sources (Spanish)."""

    mode = LanguageMode.SPANISH

    def __init__(self, correct_noise: bool = True):
        super().__init__(correct_noise)
        self._delimiter = re.compile(f"[{re.escape(self.profile.source_delimiters)}]")

    def split(self, raw_text: str) -> SegmentResult:
        """
        Split on terminal punctuation using the delimiter-count tiers.

        - 0 or 1 delimiters: fail.
        - 2 or 3 delimiters: the source ends at the first whitespace after
          the 1st delimiter, the translation at the 2nd delimiter. A 3rd
          delimiter is OCR noise.
        - 4 or more: the 2nd delimiter ends the source and the 4th ends the
          translation (helper captions add a stray pair of marks).
        """
        text = normalize_whitespace(raw_text)
        positions = [m.start() for m in self._delimiter.finditer(text)]

        if not positions:
            return SegmentResult.failed("no sentence delimiter found")
        if len(positions) == 1:
            return SegmentResult.failed("only one sentence delimiter found")

        if len(positions) <= 3:
            first, second = positions[0], positions[1]
            # Extend past the delimiter to the next space ("Sr.", "2.5")
            next_space = text.find(" ", first + 1)
            source_end = next_space if next_space != -1 else first + 1
            source = text[:source_end].strip()
            translation = text[source_end : second + 1].strip()
        else:
            second, fourth = positions[1], positions[3]
            source = text[: second + 1].strip()
            translation = text[second + 1 : fourth + 1].strip()

        return SegmentResult(source_text=source, translation_text=translation)


class UnspacedSourceSegmenter(Segmenter):
    """Segmenter for sources written without spaces (Japanese)."""

    mode = LanguageMode.JAPANESE

    def __init__(self, correct_noise: bool = True):
        super().__init__(correct_noise)
        self._source_end = re.compile(f"[{re.escape(self.profile.source_delimiters)}]")
        marks = re.escape(self.profile.translation_delimiters)
        self._translation = re.compile(f"[^{marks}]+[{marks}]")

    def _has_source_delimiter(self, line: str) -> bool:
        return bool(self._source_end.search(line) or WESTERN_MARK_AFTER_NATIVE.search(line))

    def _drop_caption(self, lines: list[str]) -> list[str]:
        """
        Remove a leading UI caption: a first line followed by a blank line.

        A line holding a source sentence delimiter is sentence content, not a
        caption, and is kept.
        """
        content = [i for i, line in enumerate(lines) if line.strip()]
        if len(content) < 2:
            return lines
        first = content[0]
        if self._has_source_delimiter(lines[first]):
            return lines
        if first + 1 < len(lines) and not lines[first + 1].strip():
            logger.debug("Dropping caption line %r", lines[first])
            return lines[first + 2 :]
        return lines

    def split(self, raw_text: str) -> SegmentResult:
        """
        Take the first natively-terminated run as the source.

        Source whitespace is removed entirely and leading icon residue is
        stripped before the delimiter search; the translation is the first
        English sentence after the source delimiter.
        """
        lines = self._drop_caption(raw_text.split("\n"))
        text = normalize_whitespace("\n".join(lines).translate(DECORATIVE_BRACKETS))
        if not text:
            return SegmentResult.failed("no text")

        compact = WHITESPACE_RUN.sub("", text)
        # Icon residue ("口!") would otherwise end the source at its first mark
        stripped = correct(compact, self.mode, TextField.SOURCE)
        skipped = len(compact) - len(stripped)
        searchable = WESTERN_MARK_AFTER_NATIVE.sub(
            lambda m: m.group(0).translate(WESTERN_TO_NATIVE), stripped
        )
        match = self._source_end.search(searchable)
        if match is None:
            return SegmentResult.failed("no source sentence delimiter found")

        # Marks were only made native for the search; keep the OCR text as read
        source = stripped[: match.end()]
        after = text[_offset_of_nth_visible(text, skipped + match.start()) + 1 :]
        translation = self._translation.search(after.translate(NATIVE_TO_WESTERN))
        if translation is None:
            return SegmentResult.failed("no translation sentence after source")

        return SegmentResult(source_text=source, translation_text=translation.group(0).strip())


def _offset_of_nth_visible(text: str, n: int) -> int:
    """Index in text of the n-th (0-based) non-whitespace character."""
    seen = -1
    for index, char in enumerate(text):
        if not char.isspace():
            seen += 1
            if seen == n:
                return index
    raise IndexError(n)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

SEGMENTERS: dict[LanguageMode, type[Segmenter]] = {
    LanguageMode.SPANISH: SpaceDelimitedSegmenter,
    LanguageMode.JAPANESE: UnspacedSourceSegmenter,
}


def get_segmenter(mode: LanguageMode | str, correct_noise: bool = True) -> Segmenter:
    """Create the segmenter for a language mode."""
    profile = get_profile(mode)
    return SEGMENTERS[profile.mode](correct_noise=correct_noise)


def segment(
    raw_text: str, mode: LanguageMode | str, correct_noise: bool = True
) -> SegmentResult:
    """
    Split OCR text into (source, translation) for a language mode.

    Example:
        >>> result = segment("Yo tengo un gato. I have a cat.", LanguageMode.SPANISH)
        >>> result.source_text, result.translation_text
        ('Yo tengo un gato.', 'I have a cat.')
    """
    return get_segmenter(mode, correct_noise).segment(raw_text)
