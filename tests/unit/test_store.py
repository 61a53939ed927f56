"""
Tests for the pair store.

OCR is replaced by StaticEngine or small in-test engines, so these run
without Tesseract.
"""

import logging
import random
import threading
import time

import pytest

from clozepair import (
    ImageStatus,
    LanguageMode,
    OCRError,
    PairNotFoundError,
    PairStore,
    PhraseSelection,
    RawOCRText,
    SegmentationError,
    SelectionError,
    SessionConfig,
    StaticEngine,
    TextField,
    WordSelection,
)
from clozepair.ocr.engines import OCREngine


class SlowEngine(OCREngine):
    """Returns a distinct Spanish card per image after a random delay."""

    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def recognize(self, image_path, language):
        time.sleep(random.uniform(0.001, 0.02))
        with self._lock:
            self.calls += 1
        n = str(image_path).split("_")[-1].split(".")[0]
        return RawOCRText.from_text(f"Frase numero {n}.\nSentence number {n}.")


class BrokenEngine(OCREngine):
    """Fails on every image with an unexpected exception."""

    def recognize(self, image_path, language):
        raise RuntimeError("engine crashed")


@pytest.fixture
def store() -> PairStore:
    return PairStore()


@pytest.fixture
def engine(ocr_payloads) -> StaticEngine:
    return StaticEngine(payloads=ocr_payloads)


class TestAddOCRResult:
    """Segmenting one image's OCR text into a stored pair."""

    def test_spanish_pair(self, store, spanish_ocr_lines):
        pair = store.add_ocr_result(RawOCRText.from_payload(spanish_ocr_lines))

        assert pair.source_text == "Yo tengo un gato."
        assert pair.translation_text == "I have a cat."
        assert pair.language is LanguageMode.SPANISH
        assert store.pairs == (pair,)

    def test_explicit_language(self, store, japanese_ocr_lines):
        pair = store.add_ocr_result(
            RawOCRText.from_payload(japanese_ocr_lines), LanguageMode.JAPANESE
        )

        assert pair.source_text == "私は猫が好きです。"
        assert pair.translation_text == "I like cats."
        assert pair.language is LanguageMode.JAPANESE

    def test_failure_stores_empty_pair(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="clozepair.store"):
            pair = store.add_ocr_result(RawOCRText.from_text("Sin puntuación"))

        assert pair.is_empty
        assert len(store) == 1
        assert "no sentence delimiter found" in caplog.text

    def test_failure_raises_with_raise_policy(self):
        store = PairStore(SessionConfig(on_segmentation_failure="raise"))

        with pytest.raises(SegmentationError, match="no sentence delimiter"):
            store.add_ocr_result(RawOCRText.from_text("Sin puntuación"))
        assert len(store) == 0

    def test_explicit_pair_id(self, store):
        pair = store.add_ocr_result(RawOCRText.from_text("Hola. Hello."), pair_id="abc123")
        assert pair.id == "abc123"

    def test_add_pair_corrects_text(self, store):
        pair = store.add_pair("Estoy feliz.", "I m happy.")

        assert pair.translation_text == "I'm happy."
        assert store.get_pair(pair.id) == pair


class TestProcessImages:
    """Concurrent OCR with per-image failure."""

    def test_one_pair_per_recognized_image(self, store, engine):
        results = store.process_images(["card_es.png", "card_noise.png"], engine)

        assert [r.status for r in results] == [ImageStatus.DONE, ImageStatus.DONE]
        assert len(store) == 2
        sources = {pair.source_text for pair in store.pairs}
        assert sources == {"Yo tengo un gato.", "Estoy feliz."}

    def test_pair_id_matches_slot(self, store, engine):
        [result] = store.process_images(["card_es.png"], engine)

        assert result.pair_id == result.id
        assert store.get_pair(result.pair_id).image_path == "card_es.png"
        assert result.ocr is not None

    def test_missing_payload_fails_only_that_image(self, store, engine):
        results = store.process_images(["card_es.png", "missing.png"], engine)
        by_path = {r.image_path: r for r in results}

        assert by_path["card_es.png"].status is ImageStatus.DONE
        assert by_path["missing.png"].status is ImageStatus.FAILED
        assert "No OCR payload" in by_path["missing.png"].error
        assert len(store) == 1

    def test_unexpected_engine_error(self, store):
        [result] = store.process_images(["a.png"], BrokenEngine())

        assert result.status is ImageStatus.FAILED
        assert "engine crashed" in result.error
        assert len(store) == 0

    def test_unsegmentable_image_gives_empty_pair(self, store, engine):
        [result] = store.process_images(["card_blank.png"], engine)

        assert result.status is ImageStatus.DONE
        assert store.get_pair(result.pair_id).is_empty

    def test_unsegmentable_image_fails_with_raise_policy(self, engine):
        store = PairStore(SessionConfig(on_segmentation_failure="raise"))
        [result] = store.process_images(["card_blank.png"], engine)

        assert result.status is ImageStatus.FAILED
        assert result.ocr is not None
        assert len(store) == 0

    def test_language_per_call(self, store, engine):
        store.process_images(["card_jp.png"], engine, language=LanguageMode.JAPANESE)

        [pair] = store.pairs
        assert pair.language is LanguageMode.JAPANESE
        assert pair.source_text == "私は猫が好きです。"

    def test_many_concurrent_images(self, store):
        engine = SlowEngine()
        paths = [f"card_{i}.png" for i in range(24)]

        results = store.process_images(paths, engine, max_workers=8)

        assert engine.calls == 24
        assert all(r.status is ImageStatus.DONE for r in results)
        assert len(store) == 24
        assert len({pair.id for pair in store.pairs}) == 24
        assert {pair.source_text for pair in store.pairs} == {
            f"Frase numero {i}." for i in range(24)
        }

    def test_results_in_submission_order(self, store):
        paths = [f"card_{i}.png" for i in range(6)]
        results = store.process_images(paths, SlowEngine(), max_workers=3)

        assert [r.image_path for r in results] == paths

    def test_no_images(self, store, engine):
        assert store.process_images([], engine) == []

    def test_results_snapshot_is_copy(self, store, engine):
        store.process_images(["card_es.png"], engine)
        snapshot = store.results[0]
        snapshot.status = ImageStatus.FAILED

        assert store.results[0].status is ImageStatus.DONE


class TestSelections:
    """Selection toggles routed through the store."""

    def test_toggle_on_and_off(self, store):
        pair = store.add_pair("Yo tengo un gato.", "I have a cat.")
        target = WordSelection("gato.", 3)

        on = store.toggle_selection(pair.id, TextField.SOURCE, target)
        assert on.source_selections == {target}

        off = store.toggle_selection(pair.id, TextField.SOURCE, target)
        assert off.source_selections == frozenset()

    def test_toggle_translation_field(self, store):
        pair = store.add_pair("Yo tengo un gato.", "I have a cat.")
        updated = store.toggle_selection(pair.id, TextField.TRANSLATION, WordSelection("cat.", 3))

        assert updated.translation_selections == {WordSelection("cat.", 3)}
        assert updated.source_selections == frozenset()

    def test_wrong_kind_rejected(self, store):
        pair = store.add_pair("Yo tengo un gato.", "I have a cat.")

        with pytest.raises(SelectionError):
            store.toggle_selection(pair.id, TextField.SOURCE, PhraseSelection("gato"))

    def test_unknown_pair(self, store):
        with pytest.raises(PairNotFoundError):
            store.toggle_selection("nope", TextField.SOURCE, WordSelection("a", 0))
        with pytest.raises(KeyError):
            store.get_pair("nope")

    def test_set_selections(self, store):
        pair = store.add_pair("私は猫が好きです。", "I like cats.", LanguageMode.JAPANESE)
        updated = store.set_selections(
            pair.id, TextField.SOURCE, [PhraseSelection("猫"), PhraseSelection("好き")]
        )

        assert updated.source_selections == {PhraseSelection("猫"), PhraseSelection("好き")}


class TestEditing:
    """Text edits, deletion and clearing."""

    def test_edit_clears_changed_field_selections(self, store):
        pair = store.add_pair("Yo tengo un gato.", "I have a cat.")
        store.toggle_selection(pair.id, TextField.SOURCE, WordSelection("gato.", 3))
        store.toggle_selection(pair.id, TextField.TRANSLATION, WordSelection("cat.", 3))

        edited = store.edit_pair(pair.id, source_text="Yo tengo un perro.")

        assert edited.source_text == "Yo tengo un perro."
        assert edited.source_selections == frozenset()
        assert edited.translation_selections == {WordSelection("cat.", 3)}
        assert store.get_pair(pair.id) == edited

    def test_edit_same_text_keeps_selections(self, store):
        pair = store.add_pair("Yo tengo un gato.", "I have a cat.")
        store.toggle_selection(pair.id, TextField.SOURCE, WordSelection("gato.", 3))

        edited = store.edit_pair(pair.id, source_text="Yo tengo un gato.")

        assert edited.source_selections == {WordSelection("gato.", 3)}

    def test_edit_corrects_text(self, store):
        pair = store.add_pair("Estoy aquí.", "I am here.")
        edited = store.edit_pair(pair.id, translation_text="I m here.")

        assert edited.translation_text == "I'm here."

    def test_edit_fills_empty_pair(self, store):
        pair = store.add_ocr_result(RawOCRText.from_text("Sin puntuación"))
        edited = store.edit_pair(pair.id, "Hola.", "Hello.")

        assert not edited.is_empty
        assert store.document() == "# Hola.\nHello."

    def test_delete_pair(self, store, engine):
        [result] = store.process_images(["card_es.png"], engine)
        other = store.add_pair("Hola.", "Hello.")

        store.delete_pair(result.pair_id)

        assert store.pairs == (other,)
        assert store.results == ()
        with pytest.raises(PairNotFoundError):
            store.delete_pair(result.pair_id)

    def test_clear(self, store, engine):
        store.process_images(["card_es.png"], engine)
        store.clear()

        assert len(store) == 0
        assert store.results == ()
        assert store.document() == ""

    def test_pairs_snapshot_unaffected_by_later_edits(self, store):
        pair = store.add_pair("Hola.", "Hello.")
        snapshot = store.pairs

        store.edit_pair(pair.id, source_text="Adiós.")

        assert snapshot[0].source_text == "Hola."


class TestOutput:
    def test_document(self, store):
        first = store.add_pair("Yo tengo un gato.", "I have a cat.")
        store.add_pair("Hola.", "Hello.")
        store.toggle_selection(first.id, TextField.SOURCE, WordSelection("gato.", 3))

        assert store.document() == "# Yo tengo un {{gato.}}\nI have a cat.\n-----\n# Hola.\nHello."

    def test_export(self, store, tmp_path):
        store.add_pair("Hola.", "Hello.")
        path = store.export(tmp_path / "deck")

        assert path.name == "deck.md"
        assert path.read_text(encoding="utf-8") == "# Hola.\nHello."

    def test_engine_ocr_error_type(self, engine):
        with pytest.raises(OCRError):
            engine.recognize("missing.png", LanguageMode.SPANISH)
