#!/usr/bin/env python3
"""
Basic clozepair Usage Example

This example demonstrates the core workflow:
1. Segment OCR text into a source sentence and its translation
2. Process screenshots through an OCR engine
3. Mark words and phrases
4. Fix a pair by hand
5. Export the flashcard document
"""

import logging

from clozepair import (
    LanguageMode,
    PairStore,
    RawOCRText,
    SessionConfig,
    StaticEngine,
    TesseractEngine,
    TextField,
    correct_with_report,
    segment,
    select_phrase,
    select_word,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Segmentation and noise correction on plain text
    # ─────────────────────────────────────────────────────────────────────────

    result = segment("Estoy feliz.\nI m happy.", LanguageMode.SPANISH)
    print(f"Source:      {result.source_text}")
    print(f"Translation: {result.translation_text}")

    report = correct_with_report("| m happy", LanguageMode.SPANISH, TextField.TRANSLATION)
    for rule, old, new in report.changes_made:
        print(f"  {rule}: {old!r} -> {new!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Process screenshots
    # ─────────────────────────────────────────────────────────────────────────

    store = PairStore(SessionConfig(max_workers=2))

    engine = TesseractEngine()
    if not engine.is_available:
        # Replay saved OCR output instead of reading pixels
        engine = StaticEngine(
            payloads={
                "card1.png": [{"text": "Yo tengo un gato."}, {"text": "I have a cat."}],
                "card2.png": [{"text": "口! 私は猫が好きです。"}, {"text": "I like cats."}],
            }
        )

    store.process_images(["card1.png"], engine, language=LanguageMode.SPANISH)
    store.process_images(["card2.png"], engine, language=LanguageMode.JAPANESE)

    for slot in store.results:
        print(f"{slot.image_path}: {slot.status.value} {slot.error or ''}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Mark targets
    # ─────────────────────────────────────────────────────────────────────────

    for pair in store.pairs:
        if pair.language is LanguageMode.SPANISH:
            # Words are picked by position
            target = select_word(pair.source_text, len(pair.source_text.split()) - 1)
        else:
            # Japanese selections are dragged substrings
            target = select_phrase(pair.source_text, "猫")
        store.toggle_selection(pair.id, TextField.SOURCE, target)

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Fix a pair by hand
    # ─────────────────────────────────────────────────────────────────────────

    pair = store.add_ocr_result(RawOCRText.from_text("unreadable"))
    if pair.is_empty:
        store.edit_pair(pair.id, "Hola.", "Hello.")

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Export
    # ─────────────────────────────────────────────────────────────────────────

    print(store.document())
    path = store.export("flashcards")
    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
