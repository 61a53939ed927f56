"""
Annotation formatter: render selections as flashcard markup.

Source text gets cloze markup ({{word}}), translation text gets bold
markup (**word**). Noise correction runs first, so stored text and
rendered text agree on the corrections.

Word mode re-tokenizes on whitespace and rejoins with single spaces;
runs of spaces in the input do not survive when anything is selected.

Phrase mode replaces every literal occurrence of each selected phrase,
longest phrase first. A shorter phrase never wraps text already inside a
longer one, so "love" and "love my" on "I love my cat" give
"I {{love my}} cat". Every occurrence of a selected phrase is wrapped,
not only the one the user dragged over.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from clozepair.models import (
    LanguageMode,
    MarkupStyle,
    PhraseSelection,
    Selection,
    TextField,
    WordSelection,
)
from clozepair.normalizers.noise import correct
from clozepair.selection import matches_granularity, tokenize

logger = logging.getLogger(__name__)

STYLE_FIELDS = {
    MarkupStyle.CLOZE: TextField.SOURCE,
    MarkupStyle.BOLD: TextField.TRANSLATION,
}


@dataclass
class FormatResult:
    """Rendered text plus which selections were used."""

    text: str
    applied: list[Selection] = field(default_factory=list)
    skipped: list[Selection] = field(default_factory=list)  # stale or wrong kind


def _format_words(
    text: str, selections: frozenset[Selection], style: MarkupStyle, result: FormatResult
) -> str:
    tokens = tokenize(text)
    out = []
    for index, token in enumerate(tokens):
        target = WordSelection(token, index)
        if target in selections:
            out.append(style.wrap(token))
            result.applied.append(target)
        else:
            out.append(token)
    return " ".join(out)


def _format_phrases(
    text: str, selections: frozenset[Selection], style: MarkupStyle, result: FormatResult
) -> str:
    # Longest first; ties broken alphabetically so output is deterministic
    ordered = sorted(selections, key=lambda s: (-len(s.phrase), s.phrase))
    claimed: list[tuple[int, int]] = []
    for selection in ordered:
        wrapped = False
        for match in re.finditer(re.escape(selection.phrase), text):
            start, end = match.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            claimed.append((start, end))
            wrapped = True
        # Absent, or every occurrence shadowed by a phrase already wrapped
        if wrapped:
            result.applied.append(selection)
        else:
            result.skipped.append(selection)

    claimed.sort()
    pieces = []
    position = 0
    for start, end in claimed:
        pieces.append(text[position:start])
        pieces.append(style.wrap(text[start:end]))
        position = end
    pieces.append(text[position:])
    return "".join(pieces)


def format_with_report(
    text: str,
    selections: Iterable[Selection],
    mode: LanguageMode,
    style: MarkupStyle,
    text_field: TextField | None = None,
    correct_noise: bool = True,
) -> FormatResult:
    """
    Render text with its selections wrapped in markup.

    Selections that no longer match the text, or are the wrong kind for
    the mode, are skipped rather than failing the whole render; they are
    listed in FormatResult.skipped.

    Args:
        text: Plain field text.
        selections: Selections taken from that text.
        mode: Language mode of the pair.
        style: CLOZE for source text, BOLD for translation text.
        text_field: Field for noise correction (defaults from style).
        correct_noise: Run the noise corrector first.

    Returns:
        FormatResult with the rendered text.
    """
    text_field = text_field or STYLE_FIELDS[style]
    if correct_noise:
        text = correct(text, mode, text_field)

    result = FormatResult(text=text)
    usable = set()
    for selection in selections:
        if matches_granularity(selection, mode):
            usable.add(selection)
        else:
            result.skipped.append(selection)

    if not usable:
        if result.skipped:
            logger.debug("Skipped %d selections of the wrong kind", len(result.skipped))
        return result

    if isinstance(next(iter(usable)), WordSelection):
        result.text = _format_words(text, frozenset(usable), style, result)
        result.skipped.extend(s for s in usable if s not in result.applied)
    else:
        phrases = frozenset(s for s in usable if isinstance(s, PhraseSelection) and s.phrase)
        result.skipped.extend(usable - phrases)
        result.text = _format_phrases(text, phrases, style, result)

    if result.skipped:
        logger.debug(
            "Skipped %d stale selection(s) on %s text: %r",
            len(result.skipped),
            text_field.value,
            result.skipped,
        )
    return result


def format_text(
    text: str,
    selections: Iterable[Selection],
    mode: LanguageMode,
    style: MarkupStyle,
    text_field: TextField | None = None,
    correct_noise: bool = True,
) -> str:
    """
    Render text with selections wrapped in cloze or bold markup.

    Example:
        >>> format_text(
        ...     "Yo tengo un gato.", {WordSelection("gato.", 3)},
        ...     LanguageMode.SPANISH, MarkupStyle.CLOZE,
        ... )
        'Yo tengo un {{gato.}}'
    """
    return format_with_report(text, selections, mode, style, text_field, correct_noise).text
