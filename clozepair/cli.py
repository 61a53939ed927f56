"""Command-line entry point: screenshots in, flashcard document out."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from clozepair.config import OCRConfig, SessionConfig
from clozepair.exceptions import ClozePairError
from clozepair.models import ImageStatus, LanguageMode, RawOCRText
from clozepair.ocr.engines import OCREngine, StaticEngine, TesseractEngine
from clozepair.store import PairStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="clozepair",
        description="Turn sentence/translation screenshots into a cloze flashcard document",
    )
    p.add_argument("images", nargs="+", help="Screenshot image paths")
    p.add_argument(
        "--language",
        default=LanguageMode.SPANISH.value,
        choices=[mode.value for mode in LanguageMode],
        help="Source language of the screenshots",
    )
    p.add_argument("--out", default="flashcards.md", help="Output document path")
    p.add_argument("--workers", type=int, default=4, help="Concurrent OCR calls")
    p.add_argument(
        "--ocr-json",
        default=None,
        help="JSON file mapping image paths to saved OCR lines (skips Tesseract)",
    )
    p.add_argument("--tesseract-cmd", default=None, help="Path to the tesseract binary")
    p.add_argument(
        "--show-ocr", action="store_true", help="Print the recognized lines of each image"
    )
    p.add_argument(
        "--min-confidence",
        type=float,
        default=0.0,
        help="Hide OCR lines below this confidence (0-1) in --show-ocr output",
    )
    p.add_argument(
        "--no-correction", action="store_true", help="Disable OCR noise correction"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def make_engine(args: argparse.Namespace, config: SessionConfig) -> OCREngine:
    if args.ocr_json:
        return StaticEngine.from_json(args.ocr_json)
    return TesseractEngine(config.ocr)


def print_ocr_preview(raw: RawOCRText, min_confidence: float) -> None:
    shown = raw.confident_lines(min_confidence)
    for line in shown:
        print(f"        {line.confidence:.2f}  {line.text}", file=sys.stderr)
    hidden = len(raw.lines) - len(shown)
    if hidden:
        print(f"        ({hidden} line(s) below {min_confidence:.2f} hidden)", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SessionConfig(
            language=LanguageMode(args.language),
            correct_noise=not args.no_correction,
            max_workers=args.workers,
            ocr=OCRConfig(
                tesseract_cmd=args.tesseract_cmd, min_line_confidence=args.min_confidence
            ),
        )
        engine = make_engine(args, config)
    except ClozePairError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    store = PairStore(config)
    results = store.process_images(args.images, engine)

    for result in results:
        if result.status is ImageStatus.FAILED:
            print(f"FAILED  {result.image_path}: {result.error}", file=sys.stderr)
        else:
            pair = store.get_pair(result.pair_id)
            marker = "EMPTY " if pair.is_empty else "OK    "
            print(f"{marker}  {result.image_path} -> #{pair.short_id}", file=sys.stderr)
        if args.show_ocr and result.ocr is not None:
            print_ocr_preview(result.ocr, config.ocr.min_line_confidence)

    if not len(store):
        print("No pairs produced.", file=sys.stderr)
        return 1

    out = store.export(Path(args.out))
    print(f"Wrote {len(store)} pair(s) to {out}", file=sys.stderr)
    return 0
