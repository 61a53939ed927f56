"""
Selection model: which words or phrases of a text are marked.

Selections are plain values held in frozensets. Every operation returns
a new set; nothing here mutates its input.

Two granularities exist (see languages.SelectionGranularity):
- WORD: WordSelection(word, index) against whitespace tokens, so the same
  word at two positions can be marked independently.
- PHRASE: PhraseSelection(phrase), an arbitrary contiguous span matched by
  content. A phrase that is a prefix of another is still its own entry;
  rendering conflicts are the formatter's business.
"""

from __future__ import annotations

from collections.abc import Iterable

from clozepair.exceptions import SelectionError
from clozepair.languages import SelectionGranularity, get_profile
from clozepair.models import LanguageMode, PhraseSelection, Selection, WordSelection

EMPTY: frozenset[Selection] = frozenset()


def toggle(selections: Iterable[Selection], target: Selection) -> frozenset[Selection]:
    """
    Add target if absent, remove it if present.

    Example:
        >>> s = toggle(frozenset(), WordSelection("gato.", 3))
        >>> toggle(s, WordSelection("gato.", 3)) == frozenset()
        True
    """
    return frozenset(selections) ^ {target}


def tokenize(text: str) -> list[str]:
    """Split text into whitespace-delimited tokens, punctuation attached."""
    return text.split()


def word_targets(text: str) -> list[WordSelection]:
    """Every selectable word of text, in order."""
    return [WordSelection(word, index) for index, word in enumerate(tokenize(text))]


def select_word(text: str, index: int) -> WordSelection:
    """
    Build the WordSelection for the token at index.

    Raises:
        SelectionError: If index is outside the token range.
    """
    tokens = tokenize(text)
    if not 0 <= index < len(tokens):
        raise SelectionError(f"word index {index} out of range for {len(tokens)} tokens")
    return WordSelection(tokens[index], index)


def select_phrase(text: str, phrase: str) -> PhraseSelection:
    """
    Build a PhraseSelection from a dragged span of text.

    Surrounding whitespace is trimmed, as a drag selection usually picks
    it up.

    Raises:
        SelectionError: If the phrase is blank or does not occur in text.
    """
    phrase = phrase.strip()
    if not phrase:
        raise SelectionError("empty phrase selection")
    if phrase not in text:
        raise SelectionError(f"phrase {phrase!r} does not occur in text")
    return PhraseSelection(phrase)


def matches_granularity(selection: Selection, mode: LanguageMode) -> bool:
    """Whether selection is the right kind for a language mode."""
    if get_profile(mode).granularity is SelectionGranularity.WORD:
        return isinstance(selection, WordSelection)
    return isinstance(selection, PhraseSelection)


def is_present(text: str, selection: Selection) -> bool:
    """Whether selection still refers to something in text."""
    if isinstance(selection, WordSelection):
        tokens = tokenize(text)
        return 0 <= selection.index < len(tokens) and tokens[selection.index] == selection.word
    return bool(selection.phrase) and selection.phrase in text


def prune(text: str, selections: Iterable[Selection]) -> frozenset[Selection]:
    """Drop selections that no longer refer to anything in text."""
    return frozenset(s for s in selections if is_present(text, s))
