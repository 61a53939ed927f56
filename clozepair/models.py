"""
Data models for clozepair.

These models represent OCR input, text pairs and their selections.
Text stored on a TextPair is always plain: markup is only ever produced
by the formatter when a document is rendered.
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class LanguageMode(str, Enum):
    """Source-language configuration of a pair (fixed at creation)."""

    SPANISH = "spa"  # space-delimited source, word-index selections
    JAPANESE = "jpn"  # non-space-delimited source, substring selections


class TextField(str, Enum):
    """Which side of a pair a text or selection belongs to."""

    SOURCE = "source"
    TRANSLATION = "translation"


class MarkupStyle(Enum):
    """Annotation markup and its delimiters."""

    CLOZE = ("{{", "}}")
    BOLD = ("**", "**")

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]

    def wrap(self, text: str) -> str:
        """Wrap text in this style's markers."""
        return f"{self.opening}{text}{self.closing}"


class ImageStatus(str, Enum):
    """Processing state of a submitted image."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


# ═══════════════════════════════════════════════════════════════════════════════
# OCR input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class OCRLine:
    """A single recognized line of text."""

    text: str
    confidence: float = 1.0  # 0.0-1.0, display only
    bounding_box: tuple[float, ...] | None = None  # display only


@dataclass(frozen=True)
class RawOCRText:
    """
    Ordered OCR lines for one image.

    Confidence and bounding boxes are carried for display; segmentation only
    ever looks at the newline-joined text.
    """

    lines: tuple[OCRLine, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    @property
    def mean_confidence(self) -> float:
        if not self.lines:
            return 0.0
        return sum(line.confidence for line in self.lines) / len(self.lines)

    def confident_lines(self, min_confidence: float = 0.0) -> tuple[OCRLine, ...]:
        """Lines at or above min_confidence, for previews."""
        return tuple(line for line in self.lines if line.confidence >= min_confidence)

    @classmethod
    def from_payload(cls, payload: list[dict[str, Any]]) -> "RawOCRText":
        """
        Build from a list of OCR line records.

        Accepts records shaped like ``{"text": ..., "confidence": ...,
        "boundingBox": [...]}`` (``bounding_box`` is accepted too).

        Args:
            payload: Line records in reading order.

        Returns:
            RawOCRText with one OCRLine per record.
        """
        lines = []
        for record in payload:
            box = record.get("boundingBox", record.get("bounding_box"))
            lines.append(
                OCRLine(
                    text=str(record.get("text", "")),
                    confidence=float(record.get("confidence", 1.0)),
                    bounding_box=tuple(box) if box else None,
                )
            )
        return cls(lines=tuple(lines))

    @classmethod
    def from_text(cls, text: str) -> "RawOCRText":
        """Build from already-joined text, one OCRLine per line."""
        return cls(lines=tuple(OCRLine(text=line) for line in text.split("\n")))


# ═══════════════════════════════════════════════════════════════════════════════
# Selections
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class WordSelection:
    """
    A word at a specific token position.

    The same surface word at two positions is two distinct targets.
    """

    word: str
    index: int


@dataclass(frozen=True)
class PhraseSelection:
    """A literal contiguous span, matched by content (may contain spaces)."""

    phrase: str


Selection = WordSelection | PhraseSelection


# ═══════════════════════════════════════════════════════════════════════════════
# Pairs and results
# ═══════════════════════════════════════════════════════════════════════════════


def new_pair_id() -> str:
    """Return a fresh opaque pair identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TextPair:
    """
    A source sentence, its translation, and the selections on each.

    Instances are immutable; every change returns a new TextPair.

    Example:
        >>> pair = TextPair(source_text="Yo tengo un gato.", translation_text="I have a cat.")
        >>> pair = pair.with_selections(TextField.SOURCE, {WordSelection("gato.", 3)})
    """

    source_text: str
    translation_text: str
    language: LanguageMode = LanguageMode.SPANISH
    source_selections: frozenset[Selection] = frozenset()
    translation_selections: frozenset[Selection] = frozenset()
    id: str = field(default_factory=new_pair_id)
    image_path: str | None = None

    @property
    def short_id(self) -> str:
        """Last four characters of the id, for display."""
        return self.id[-4:]

    @property
    def is_empty(self) -> bool:
        return not self.source_text and not self.translation_text

    def text_for(self, text_field: TextField) -> str:
        if text_field is TextField.SOURCE:
            return self.source_text
        return self.translation_text

    def selections_for(self, text_field: TextField) -> frozenset[Selection]:
        if text_field is TextField.SOURCE:
            return self.source_selections
        return self.translation_selections

    def with_selections(self, text_field: TextField, selections) -> "TextPair":
        """Return a copy with the selections of one field replaced."""
        if text_field is TextField.SOURCE:
            return replace(self, source_selections=frozenset(selections))
        return replace(self, translation_selections=frozenset(selections))

    def with_texts(
        self,
        source_text: str | None = None,
        translation_text: str | None = None,
    ) -> "TextPair":
        """
        Return a copy with new text.

        A field whose text changes loses its selections, since selections
        are only valid against the exact text they were taken from.
        """
        changes: dict[str, Any] = {}
        if source_text is not None and source_text != self.source_text:
            changes["source_text"] = source_text
            changes["source_selections"] = frozenset()
        if translation_text is not None and translation_text != self.translation_text:
            changes["translation_text"] = translation_text
            changes["translation_selections"] = frozenset()
        if not changes:
            return self
        return replace(self, **changes)


@dataclass(frozen=True)
class SegmentResult:
    """Result of splitting OCR text into source and translation."""

    source_text: str
    translation_text: str
    failure_reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure_reason is None

    @classmethod
    def failed(cls, reason: str) -> "SegmentResult":
        """An empty pair carrying the reason segmentation gave up."""
        return cls(source_text="", translation_text="", failure_reason=reason)


@dataclass
class ImageResult:
    """Processing slot for one submitted image."""

    image_path: str
    id: str = field(default_factory=new_pair_id)
    status: ImageStatus = ImageStatus.PENDING
    ocr: RawOCRText | None = None
    pair_id: str | None = None
    error: str | None = None

    @property
    def is_processing(self) -> bool:
        return self.status is ImageStatus.PENDING
