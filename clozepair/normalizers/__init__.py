"""
Normalizers for OCR text.

- correct: Apply the ordered noise-correction table to one field
- correct_with_report: Same, returning the individual changes
- CORRECTION_RULES: The rule table, in application order
"""

from clozepair.normalizers.noise import (
    CORRECTION_RULES,
    CorrectionResult,
    CorrectionRule,
    correct,
    correct_with_report,
    rules_for,
)

__all__ = [
    "CORRECTION_RULES",
    "CorrectionRule",
    "CorrectionResult",
    "correct",
    "correct_with_report",
    "rules_for",
]
