"""
Pytest configuration and fixtures for clozepair tests.
"""

import pytest


@pytest.fixture
def spanish_ocr_lines() -> list[dict]:
    """OCR payload for a Spanish card: the sentence wraps onto two lines."""
    return [
        {"text": "Yo tengo un", "confidence": 0.94, "boundingBox": [10, 10, 200, 40]},
        {"text": "gato.", "confidence": 0.91, "boundingBox": [10, 45, 80, 75]},
        {"text": "I have a cat.", "confidence": 0.97, "boundingBox": [10, 90, 220, 120]},
    ]


@pytest.fixture
def japanese_ocr_lines() -> list[dict]:
    """OCR payload for a Japanese card with a caption and icon residue."""
    return [
        {"text": "New word", "confidence": 0.88},
        {"text": "", "confidence": 0.0},
        {"text": "口! 私は猫が 好きです。", "confidence": 0.72},
        {"text": "I like cats.", "confidence": 0.95},
    ]


@pytest.fixture
def ocr_payloads(spanish_ocr_lines, japanese_ocr_lines) -> dict[str, list[dict]]:
    """Saved OCR payloads keyed by image path."""
    return {
        "card_es.png": spanish_ocr_lines,
        "card_jp.png": japanese_ocr_lines,
        "card_noise.png": [{"text": "Estoy feliz."}, {"text": "| m happy."}],
        "card_blank.png": [{"text": "Sin puntuación"}],
    }
