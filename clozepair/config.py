"""
Configuration for clozepair sessions.

Defaults reproduce the flashcard workflow: Spanish source, noise
correction on, and an empty pair stored when segmentation fails.
"""

from dataclasses import dataclass, field
from typing import Literal

from clozepair.exceptions import ConfigurationError
from clozepair.models import LanguageMode


@dataclass
class OCRConfig:
    """
    Configuration for the Tesseract OCR adapter.

    Example:
        >>> config = SessionConfig(ocr=OCRConfig(tesseract_cmd="/usr/local/bin/tesseract"))
    """

    # Path to the tesseract binary (None = use PATH)
    tesseract_cmd: str | None = None

    # Tesseract --psm value; 6 = assume a single uniform block of text
    page_segmentation_mode: int = 6

    # Lines under this confidence are hidden from previews, never from segmentation
    min_line_confidence: float = 0.0

    def __post_init__(self):
        """Validate configuration."""
        if not 0 <= self.page_segmentation_mode <= 13:
            raise ConfigurationError(
                f"page_segmentation_mode must be between 0 and 13, "
                f"got {self.page_segmentation_mode}"
            )
        if self.min_line_confidence < 0.0 or self.min_line_confidence > 1.0:
            raise ConfigurationError(
                f"min_line_confidence must be between 0.0 and 1.0, "
                f"got {self.min_line_confidence}"
            )


@dataclass
class SessionConfig:
    """
    Configuration for a pair store session.

    Example:
        >>> config = SessionConfig(language=LanguageMode.JAPANESE, max_workers=2)
        >>> store = PairStore(config)
    """

    # Language used for pairs created without an explicit mode
    language: LanguageMode = LanguageMode.SPANISH

    # Apply OCR noise correction to segmented and edited text
    correct_noise: bool = True

    # Error handling
    on_segmentation_failure: Literal["empty", "raise"] = "empty"

    # Concurrent OCR calls
    max_workers: int = 4

    ocr: OCRConfig = field(default_factory=OCRConfig)

    def __post_init__(self):
        """Validate configuration."""
        try:
            self.language = LanguageMode(self.language)
        except ValueError as e:
            valid = tuple(mode.value for mode in LanguageMode)
            raise ConfigurationError(
                f"language must be one of {valid}, got {self.language!r}"
            ) from e

        valid_failure_policies = ("empty", "raise")
        if self.on_segmentation_failure not in valid_failure_policies:
            raise ConfigurationError(
                f"on_segmentation_failure must be one of {valid_failure_policies}, "
                f"got {self.on_segmentation_failure!r}"
            )

        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
