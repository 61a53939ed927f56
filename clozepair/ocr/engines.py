"""
OCR engines that turn a flashcard screenshot into OCR lines.

The core treats OCR as a black box: an engine takes an image path and a
language mode and returns RawOCRText. Two engines are provided:
- TesseractEngine: Tesseract via pytesseract (optional dependency)
- StaticEngine: replays saved OCR payloads, for offline runs and tests

Engines raise OCRError for any failure; the pair store turns that into a
failed image slot without touching other images.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from clozepair.config import OCRConfig
from clozepair.exceptions import OCRError
from clozepair.languages import get_profile
from clozepair.models import LanguageMode, OCRLine, RawOCRText

logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE DETECTION
# =============================================================================


def _check_tesseract_available() -> bool:
    """Check if Tesseract is installed and usable."""
    try:
        import pytesseract

        pytesseract.get_tesseract_version()
        return True
    except ImportError:
        logger.debug("pytesseract not installed")
        return False
    except pytesseract.TesseractNotFoundError:
        logger.debug("Tesseract binary not found")
        return False


# =============================================================================
# ENGINES
# =============================================================================


class OCREngine(ABC):
    """Recognizes the text lines of one image."""

    @abstractmethod
    def recognize(self, image_path: str | Path, language: LanguageMode) -> RawOCRText:
        """
        Run OCR on an image.

        Args:
            image_path: Path to the screenshot.
            language: Language mode of the pair being captured.

        Returns:
            RawOCRText with lines in reading order.

        Raises:
            OCRError: If no text could be produced.
        """

    @property
    def is_available(self) -> bool:
        return True


def load_image(image_path: str | Path) -> Image.Image:
    """
    Open an image and convert it to RGB.

    Raises:
        OCRError: If the file is missing or not an image.
    """
    try:
        with Image.open(image_path) as image:
            return image.convert("RGB")
    except (OSError, UnidentifiedImageError) as e:
        raise OCRError(f"Cannot read image {image_path}: {e}") from e


def lines_from_tesseract_data(data: Mapping[str, list[Any]]) -> RawOCRText:
    """
    Group pytesseract image_to_data output into lines.

    Words are grouped by (block, paragraph, line). Line confidence is the
    mean word confidence scaled to 0..1; -1 (no confidence) is ignored.
    Bounding boxes are (left, top, right, bottom) in pixels.
    """
    grouped: dict[tuple[int, int, int], dict[str, list]] = {}
    for i, word in enumerate(data["text"]):
        if not str(word).strip():
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        line = grouped.setdefault(key, {"words": [], "conf": [], "boxes": []})
        line["words"].append(str(word).strip())
        conf = float(data["conf"][i])
        if conf >= 0:
            line["conf"].append(conf / 100.0)
        left, top = int(data["left"][i]), int(data["top"][i])
        line["boxes"].append(
            (left, top, left + int(data["width"][i]), top + int(data["height"][i]))
        )

    lines = []
    for key in sorted(grouped):
        line = grouped[key]
        boxes = line["boxes"]
        lines.append(
            OCRLine(
                text=" ".join(line["words"]),
                confidence=sum(line["conf"]) / len(line["conf"]) if line["conf"] else 0.0,
                bounding_box=(
                    min(b[0] for b in boxes),
                    min(b[1] for b in boxes),
                    max(b[2] for b in boxes),
                    max(b[3] for b in boxes),
                ),
            )
        )
    return RawOCRText(lines=tuple(lines))


@dataclass
class TesseractEngine(OCREngine):
    """
    Tesseract OCR through pytesseract.

    Attributes:
        config: OCRConfig with the binary path and page segmentation mode.

    Example:
        >>> engine = TesseractEngine()
        >>> raw = engine.recognize("screenshot.png", LanguageMode.SPANISH)
        >>> print(raw.text)
    """

    config: OCRConfig = field(default_factory=OCRConfig)

    def __post_init__(self) -> None:
        if self.config.tesseract_cmd:
            try:
                import pytesseract

                pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
            except ImportError:
                logger.debug("pytesseract not installed; tesseract_cmd ignored")

    @property
    def is_available(self) -> bool:
        return _check_tesseract_available()

    def recognize(self, image_path: str | Path, language: LanguageMode) -> RawOCRText:
        try:
            import pytesseract
        except ImportError as e:
            raise OCRError("pytesseract not installed (pip install clozepair[ocr])") from e

        image = load_image(image_path)
        lang = get_profile(language).ocr_language
        try:
            data = pytesseract.image_to_data(
                image,
                lang=lang,
                config=f"--psm {self.config.page_segmentation_mode}",
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OCRError(f"Tesseract failed on {image_path}: {e}") from e

        raw = lines_from_tesseract_data(data)
        if not raw.lines:
            raise OCRError(f"No text recognized in {image_path}")

        logger.debug(
            "OCR %s (%s): %d lines, mean confidence %.2f",
            image_path,
            lang,
            len(raw.lines),
            raw.mean_confidence,
        )
        return raw


@dataclass
class StaticEngine(OCREngine):
    """
    Replays saved OCR payloads instead of reading pixels.

    Payloads are keyed by image path (as given to recognize()) and hold
    line records, see RawOCRText.from_payload(). A key with no payload
    raises OCRError, like an unreadable image would.
    """

    payloads: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, path: str | Path) -> StaticEngine:
        """Load payloads from a JSON object mapping image paths to line lists."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise OCRError(f"Cannot load OCR payloads from {path}: {e}") from e
        if not isinstance(data, dict):
            raise OCRError(f"{path}: expected an object mapping image paths to OCR lines")
        return cls(payloads={str(key): value for key, value in data.items()})

    def recognize(self, image_path: str | Path, language: LanguageMode) -> RawOCRText:
        payload = self.payloads.get(str(image_path))
        if payload is None:
            raise OCRError(f"No OCR payload for {image_path}")
        return RawOCRText.from_payload(payload)
