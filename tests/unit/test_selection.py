"""Tests for the selection model."""

import pytest

from clozepair import SelectionError
from clozepair.models import LanguageMode, PhraseSelection, WordSelection
from clozepair.selection import (
    EMPTY,
    is_present,
    matches_granularity,
    prune,
    select_phrase,
    select_word,
    toggle,
    tokenize,
    word_targets,
)


class TestToggle:
    """toggle() adds absent targets and removes present ones."""

    def test_adds_absent(self):
        assert toggle(EMPTY, WordSelection("gato.", 3)) == {WordSelection("gato.", 3)}

    def test_removes_present(self):
        selections = frozenset({WordSelection("gato.", 3), WordSelection("Yo", 0)})
        assert toggle(selections, WordSelection("gato.", 3)) == {WordSelection("Yo", 0)}

    @pytest.mark.parametrize(
        "start",
        [
            frozenset(),
            frozenset({WordSelection("el", 0)}),
            frozenset({WordSelection("el", 0), WordSelection("el", 3)}),
        ],
    )
    def test_double_toggle_is_identity(self, start):
        target = WordSelection("el", 3)
        assert toggle(toggle(start, target), target) == start

    def test_input_not_mutated(self):
        original = {PhraseSelection("猫")}
        result = toggle(original, PhraseSelection("犬"))

        assert original == {PhraseSelection("猫")}
        assert isinstance(result, frozenset)

    def test_same_word_different_positions_independent(self):
        selections = toggle(toggle(EMPTY, WordSelection("el", 0)), WordSelection("el", 3))
        selections = toggle(selections, WordSelection("el", 0))

        assert selections == {WordSelection("el", 3)}

    def test_overlapping_phrases_are_independent_entries(self):
        selections = toggle(toggle(EMPTY, PhraseSelection("love")), PhraseSelection("love my"))

        assert len(selections) == 2
        assert toggle(selections, PhraseSelection("love")) == {PhraseSelection("love my")}


class TestWordTargets:
    def test_tokenize_keeps_punctuation(self):
        assert tokenize("Yo tengo un gato.") == ["Yo", "tengo", "un", "gato."]

    def test_tokenize_collapses_spaces(self):
        assert tokenize("  Yo   tengo ") == ["Yo", "tengo"]

    def test_word_targets(self):
        assert word_targets("el gato y el perro")[3] == WordSelection("el", 3)

    def test_select_word(self):
        assert select_word("Yo tengo un gato.", 3) == WordSelection("gato.", 3)

    @pytest.mark.parametrize("index", [-1, 4, 10])
    def test_select_word_out_of_range(self, index):
        with pytest.raises(SelectionError, match="out of range"):
            select_word("Yo tengo un gato.", index)


class TestPhraseTargets:
    def test_select_phrase_trims(self):
        assert select_phrase("I love my cat", " love my ") == PhraseSelection("love my")

    def test_select_phrase_japanese(self):
        assert select_phrase("私は猫が好きです。", "猫") == PhraseSelection("猫")

    @pytest.mark.parametrize("phrase", ["", "   "])
    def test_blank_phrase_rejected(self, phrase):
        with pytest.raises(SelectionError, match="empty"):
            select_phrase("I love my cat", phrase)

    def test_absent_phrase_rejected(self):
        with pytest.raises(SelectionError, match="does not occur"):
            select_phrase("I love my cat", "dog")


class TestGranularity:
    def test_spanish_takes_words(self):
        assert matches_granularity(WordSelection("gato.", 3), LanguageMode.SPANISH)
        assert not matches_granularity(PhraseSelection("gato"), LanguageMode.SPANISH)

    def test_japanese_takes_phrases(self):
        assert matches_granularity(PhraseSelection("猫"), LanguageMode.JAPANESE)
        assert not matches_granularity(WordSelection("猫", 0), LanguageMode.JAPANESE)


class TestPresence:
    def test_word_present_only_at_its_index(self):
        assert is_present("Yo tengo un gato.", WordSelection("gato.", 3))
        assert not is_present("Yo tengo un gato.", WordSelection("gato.", 2))
        assert not is_present("Yo tengo un gato.", WordSelection("gato.", 9))

    def test_phrase_present(self):
        assert is_present("I love my cat", PhraseSelection("love my"))
        assert not is_present("I love my cat", PhraseSelection("my dog"))

    def test_prune_drops_stale(self):
        selections = {WordSelection("gato.", 3), WordSelection("perro.", 3)}
        assert prune("Yo tengo un gato.", selections) == {WordSelection("gato.", 3)}
