"""
Flashcard document serializer.

The document format is read by a third-party flashcard importer and is
fixed:

    # <source with {{cloze}} markup>
    <translation with **bold** markup>
    -----
    # <next source>
    <next translation>

No separator follows the last block; no pairs gives an empty string.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from clozepair.formatting import format_text
from clozepair.models import MarkupStyle, TextField, TextPair

logger = logging.getLogger(__name__)

SEPARATOR = "-----"
HEADING_PREFIX = "# "
DEFAULT_SUFFIX = ".md"


def render_pair(pair: TextPair, correct_noise: bool = True) -> str:
    """Render one pair as a two-line flashcard block."""
    source = format_text(
        pair.source_text,
        pair.source_selections,
        pair.language,
        MarkupStyle.CLOZE,
        TextField.SOURCE,
        correct_noise,
    )
    translation = format_text(
        pair.translation_text,
        pair.translation_selections,
        pair.language,
        MarkupStyle.BOLD,
        TextField.TRANSLATION,
        correct_noise,
    )
    return f"{HEADING_PREFIX}{source}\n{translation}"


def serialize(pairs: Iterable[TextPair], correct_noise: bool = True) -> str:
    """
    Serialize pairs, in order, into one flashcard document.

    Example:
        >>> serialize([TextPair("A", "B"), TextPair("C", "D")])
        '# A\\nB\\n-----\\n# C\\nD'
    """
    return f"\n{SEPARATOR}\n".join(render_pair(pair, correct_noise) for pair in pairs)


def write_document(
    pairs: Iterable[TextPair], path: str | Path, correct_noise: bool = True
) -> Path:
    """
    Serialize pairs and write the document as UTF-8 text.

    A path without a suffix gets ".md".

    Returns:
        The path written.
    """
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(DEFAULT_SUFFIX)
    text = serialize(pairs, correct_noise)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote flashcard document to %s (%d chars)", path, len(text))
    return path
