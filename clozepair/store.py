"""
Pair store: the editing session behind the flashcard workflow.

The store wires OCR output into the segmenter, keeps the ordered list of
pairs, routes selection toggles and text edits, and renders the
flashcard document on demand.

Concurrency: images may be recognized in parallel and finish in any
order. Each completion segments its own text and appends one pair; all
mutations of the store go through a single lock. An OCR failure marks
only that image's slot as failed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from pathlib import Path
from threading import Lock

from clozepair.config import SessionConfig
from clozepair.exceptions import (
    OCRError,
    PairNotFoundError,
    SegmentationError,
    SelectionError,
)
from clozepair.models import (
    ImageResult,
    ImageStatus,
    LanguageMode,
    RawOCRText,
    Selection,
    TextField,
    TextPair,
)
from clozepair.normalizers.noise import correct
from clozepair.ocr.engines import OCREngine
from clozepair.segmenter import get_segmenter
from clozepair.selection import matches_granularity, toggle
from clozepair.serializer import serialize, write_document

logger = logging.getLogger(__name__)


class PairStore:
    """
    In-memory, thread-safe collection of text pairs for one session.

    Example:
        >>> store = PairStore()
        >>> pair = store.add_ocr_result(RawOCRText.from_text("Yo tengo un gato.\\nI have a cat."))
        >>> pair = store.toggle_selection(pair.id, TextField.SOURCE, WordSelection("gato.", 3))
        >>> print(store.document())
        # Yo tengo un {{gato.}}
        I have a cat.
    """

    def __init__(self, config: SessionConfig | None = None) -> None:
        self.config = config or SessionConfig()
        self._lock = Lock()
        self._pairs: list[TextPair] = []
        self._results: list[ImageResult] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def pairs(self) -> tuple[TextPair, ...]:
        """Snapshot of the pairs, in insertion order."""
        with self._lock:
            return tuple(self._pairs)

    @property
    def results(self) -> tuple[ImageResult, ...]:
        """Snapshot of the image processing slots."""
        with self._lock:
            return tuple(replace(r) for r in self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pairs)

    def get_pair(self, pair_id: str) -> TextPair:
        with self._lock:
            return self._pairs[self._index_of(pair_id)]

    def _index_of(self, pair_id: str) -> int:
        # Caller holds the lock
        for index, pair in enumerate(self._pairs):
            if pair.id == pair_id:
                return index
        raise PairNotFoundError(pair_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Creating pairs
    # ─────────────────────────────────────────────────────────────────────────

    def add_ocr_result(
        self,
        raw: RawOCRText,
        language: LanguageMode | None = None,
        image_path: str | None = None,
        pair_id: str | None = None,
    ) -> TextPair:
        """
        Segment one image's OCR text and append the resulting pair.

        On segmentation failure an empty pair is appended so the user can
        type the text in, unless on_segmentation_failure == "raise".

        Args:
            raw: OCR lines for one image.
            language: Language mode (defaults to the session language).
            image_path: Source image, kept for display.
            pair_id: Explicit id (used to tie a pair to its image slot).

        Returns:
            The appended TextPair.

        Raises:
            SegmentationError: If segmentation fails and the policy is "raise".
        """
        language = LanguageMode(language or self.config.language)
        segmenter = get_segmenter(language, correct_noise=self.config.correct_noise)
        result = segmenter.segment(raw.text)

        if not result.succeeded:
            if self.config.on_segmentation_failure == "raise":
                raise SegmentationError(
                    f"Cannot segment {image_path or 'OCR text'}: {result.failure_reason}"
                )
            logger.warning(
                "Segmentation failed for %s: %s; storing empty pair",
                image_path or "OCR text",
                result.failure_reason,
            )

        pair = TextPair(
            source_text=result.source_text,
            translation_text=result.translation_text,
            language=language,
            image_path=image_path,
        )
        if pair_id is not None:
            pair = replace(pair, id=pair_id)

        with self._lock:
            self._pairs.append(pair)
        return pair

    def add_pair(
        self,
        source_text: str,
        translation_text: str,
        language: LanguageMode | None = None,
    ) -> TextPair:
        """Append a pair typed in by hand (noise correction still applies)."""
        language = LanguageMode(language or self.config.language)
        pair = TextPair(
            source_text=self._correct(source_text, language, TextField.SOURCE),
            translation_text=self._correct(translation_text, language, TextField.TRANSLATION),
            language=language,
        )
        with self._lock:
            self._pairs.append(pair)
        return pair

    def process_images(
        self,
        image_paths: Iterable[str | Path],
        engine: OCREngine,
        language: LanguageMode | None = None,
        max_workers: int | None = None,
    ) -> list[ImageResult]:
        """
        OCR images concurrently and append one pair per recognized image.

        Pairs are appended in completion order. A failing image is marked
        failed and contributes no pair; the others are unaffected.

        Args:
            image_paths: Screenshots to process.
            engine: OCR engine to call for each image.
            language: Language mode for all of these images.
            max_workers: Concurrent OCR calls (defaults to config.max_workers).

        Returns:
            The image slots created by this call, in submission order.
        """
        language = LanguageMode(language or self.config.language)
        slots = [ImageResult(image_path=str(path)) for path in image_paths]
        with self._lock:
            self._results.extend(slots)
        if not slots:
            return []

        workers = max_workers or self.config.max_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(engine.recognize, slot.image_path, language): slot
                for slot in slots
            }
            for future in as_completed(futures):
                slot = futures[future]
                try:
                    raw = future.result()
                except OCRError as e:
                    self._fail(slot, str(e))
                    continue
                except Exception as e:  # noqa: BLE001
                    self._fail(slot, f"OCR processing failed: {e}")
                    continue

                try:
                    pair = self.add_ocr_result(
                        raw, language, image_path=slot.image_path, pair_id=slot.id
                    )
                except SegmentationError as e:
                    self._fail(slot, str(e), raw)
                    continue

                with self._lock:
                    slot.ocr = raw
                    slot.pair_id = pair.id
                    slot.status = ImageStatus.DONE
                logger.debug("Processed %s -> pair %s", slot.image_path, pair.short_id)

        done = sum(1 for slot in slots if slot.status is ImageStatus.DONE)
        logger.info("Processed %d image(s): %d ok, %d failed", len(slots), done, len(slots) - done)
        return [replace(slot) for slot in slots]

    def _fail(self, slot: ImageResult, error: str, raw: RawOCRText | None = None) -> None:
        logger.warning("Image %s failed: %s", slot.image_path, error)
        with self._lock:
            slot.status = ImageStatus.FAILED
            slot.error = error
            slot.ocr = raw

    # ─────────────────────────────────────────────────────────────────────────
    # Editing
    # ─────────────────────────────────────────────────────────────────────────

    def _correct(self, text: str, language: LanguageMode, text_field: TextField) -> str:
        if not self.config.correct_noise:
            return text
        return correct(text, language, text_field)

    def _check_target(self, pair: TextPair, target: Selection) -> None:
        if not matches_granularity(target, pair.language):
            raise SelectionError(
                f"{type(target).__name__} does not apply to {pair.language.value} pairs"
            )

    def toggle_selection(self, pair_id: str, text_field: TextField, target: Selection) -> TextPair:
        """
        Toggle one selection on a field of a pair.

        Raises:
            PairNotFoundError: If pair_id is unknown.
            SelectionError: If target is the wrong kind for the pair's language.
        """
        with self._lock:
            index = self._index_of(pair_id)
            pair = self._pairs[index]
            self._check_target(pair, target)
            updated = pair.with_selections(
                text_field, toggle(pair.selections_for(text_field), target)
            )
            self._pairs[index] = updated
        return updated

    def set_selections(
        self, pair_id: str, text_field: TextField, selections: Iterable[Selection]
    ) -> TextPair:
        """Replace all selections on a field of a pair."""
        selections = frozenset(selections)
        with self._lock:
            index = self._index_of(pair_id)
            pair = self._pairs[index]
            for target in selections:
                self._check_target(pair, target)
            updated = pair.with_selections(text_field, selections)
            self._pairs[index] = updated
        return updated

    def edit_pair(
        self,
        pair_id: str,
        source_text: str | None = None,
        translation_text: str | None = None,
    ) -> TextPair:
        """
        Replace the text of a pair.

        Edited text is noise-corrected; a field whose text changes loses its
        selections.
        """
        with self._lock:
            index = self._index_of(pair_id)
            pair = self._pairs[index]
            if source_text is not None:
                source_text = self._correct(source_text, pair.language, TextField.SOURCE)
            if translation_text is not None:
                translation_text = self._correct(
                    translation_text, pair.language, TextField.TRANSLATION
                )
            updated = pair.with_texts(source_text, translation_text)
            self._pairs[index] = updated
        return updated

    def delete_pair(self, pair_id: str) -> None:
        """Remove a pair and the image slot that produced it."""
        with self._lock:
            del self._pairs[self._index_of(pair_id)]
            self._results = [r for r in self._results if r.pair_id != pair_id]

    def clear(self) -> None:
        with self._lock:
            self._pairs.clear()
            self._results.clear()

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    def document(self) -> str:
        """Render the flashcard document for the current pairs."""
        return serialize(self.pairs, correct_noise=self.config.correct_noise)

    def export(self, path: str | Path) -> Path:
        """Write the flashcard document to path (".md" added if no suffix)."""
        return write_document(self.pairs, path, correct_noise=self.config.correct_noise)
