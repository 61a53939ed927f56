"""
clozepair: Turn sentence/translation screenshots into cloze flashcards.

A language-learning screenshot holds one source sentence and its English
translation. clozepair splits the OCR text of such a screenshot into the
two sentences, repairs common OCR noise, tracks the words the learner
marks, and renders everything as one flashcard document:

    # Yo tengo un {{gato.}}
    I have a **cat.**
    -----
    # ...

Example:
    >>> import clozepair
    >>> store = clozepair.PairStore()
    >>> store.process_images(["card1.png", "card2.png"], clozepair.TesseractEngine())
    >>> store.export("deck.md")
"""

from clozepair.config import OCRConfig, SessionConfig
from clozepair.exceptions import (
    ClozePairError,
    ConfigurationError,
    OCRError,
    PairNotFoundError,
    SegmentationError,
    SelectionError,
)
from clozepair.formatting import FormatResult, format_text, format_with_report
from clozepair.languages import LanguageProfile, SelectionGranularity, get_profile
from clozepair.models import (
    ImageResult,
    ImageStatus,
    LanguageMode,
    MarkupStyle,
    OCRLine,
    PhraseSelection,
    RawOCRText,
    SegmentResult,
    Selection,
    TextField,
    TextPair,
    WordSelection,
)
from clozepair.normalizers import correct, correct_with_report
from clozepair.ocr import OCREngine, StaticEngine, TesseractEngine
from clozepair.segmenter import get_segmenter, segment
from clozepair.selection import select_phrase, select_word, toggle, word_targets
from clozepair.serializer import SEPARATOR, serialize, write_document
from clozepair.store import PairStore

__version__ = "0.1.0"
__all__ = [
    # Session
    "PairStore",
    "SessionConfig",
    "OCRConfig",
    # Core operations
    "segment",
    "get_segmenter",
    "correct",
    "correct_with_report",
    "toggle",
    "select_word",
    "select_phrase",
    "word_targets",
    "format_text",
    "format_with_report",
    "FormatResult",
    "serialize",
    "write_document",
    "SEPARATOR",
    # Languages
    "LanguageMode",
    "LanguageProfile",
    "SelectionGranularity",
    "get_profile",
    # Models
    "TextField",
    "MarkupStyle",
    "OCRLine",
    "RawOCRText",
    "TextPair",
    "Selection",
    "WordSelection",
    "PhraseSelection",
    "SegmentResult",
    "ImageResult",
    "ImageStatus",
    # OCR
    "OCREngine",
    "TesseractEngine",
    "StaticEngine",
    # Exceptions
    "ClozePairError",
    "ConfigurationError",
    "OCRError",
    "SegmentationError",
    "SelectionError",
    "PairNotFoundError",
]
