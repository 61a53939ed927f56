"""
OCR collaborators for flashcard screenshots.

Example:
    >>> from clozepair.ocr import TesseractEngine
    >>> engine = TesseractEngine()
    >>> raw = engine.recognize("screenshot.png", LanguageMode.JAPANESE)
"""

from clozepair.ocr.engines import (
    OCREngine,
    StaticEngine,
    TesseractEngine,
    lines_from_tesseract_data,
    load_image,
)

__all__ = [
    "OCREngine",
    "TesseractEngine",
    "StaticEngine",
    "lines_from_tesseract_data",
    "load_image",
]
