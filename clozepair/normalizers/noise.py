"""
OCR noise correction for segmented sentences.

Screenshot OCR misreads a handful of things over and over: the pronoun
"I" comes back as a vertical bar or a digit, and contraction apostrophes
are dropped ("I m", "don t") or read as a backtick. The corrections here
are a fixed, ordered rule table rather than a spellchecker: each rule is
(pattern, replacement, fields, modes) and can be tested on its own.

Rule application:
- Rules run in table order within a pass. A match that overlaps a region
  already claimed by an earlier rule in the same pass is dropped.
- Passes repeat until the text stops changing, so correct() is idempotent
  even where one rule's output feeds another ("| m" -> "I m" -> "I'm").
"""

import logging
import re
from dataclasses import dataclass, field

from clozepair.models import LanguageMode, TextField

logger = logging.getLogger(__name__)

# Upper bound on passes; every rule chain in the table settles in three
MAX_PASSES = 5

ALL_MODES = frozenset(LanguageMode)
TRANSLATION_ONLY = frozenset({TextField.TRANSLATION})
SOURCE_ONLY = frozenset({TextField.SOURCE})


# ============================================================================
# Rule Table
# ============================================================================


@dataclass(frozen=True)
class CorrectionRule:
    """One entry of the correction table."""

    name: str
    pattern: re.Pattern
    replacement: str  # re template, e.g. r"\1't"
    fields: frozenset[TextField]
    modes: frozenset[LanguageMode] = ALL_MODES

    def applies_to(self, mode: LanguageMode, text_field: TextField) -> bool:
        return mode in self.modes and text_field in self.fields


def _alternation(words: tuple[str, ...]) -> str:
    # Longest first so "doesn" is tried before "do"-like prefixes
    return "|".join(sorted(words, key=len, reverse=True))


# Stems whose contraction apostrophe OCR tends to lose
NEGATION_STEMS = (
    "don", "doesn", "didn", "isn", "aren", "wasn", "weren", "hasn", "haven",
    "hadn", "couldn", "wouldn", "shouldn", "mustn", "needn", "can", "won", "ain",
)
PLURAL_PRONOUNS = ("you", "we", "they")
SINGULAR_STEMS = ("he", "she", "it", "that", "there", "here", "what", "where", "who", "how")

# Characters OCR returns in place of an apostrophe
APOSTROPHE_CONFUSABLES = "`´‘’"

# Glyphs OCR produces for the speaker icon in front of a Japanese prompt.
# A closed list: any kana or kanji here would be the first character of a
# real sentence such as "え!本当?", which must survive.
FILLER_GLYPHS = "口ロ□■◆◇○●〇•"
STRAY_SYMBOLS = "【】〔〕〖〗[]()（）<>《》〈〉|｜!！?？*＊#＃@＠:：;；~～=＝+＋/／・\\-"

# Mid-sentence contraction: preceded by whitespace or an opening mark
_MID = r"(?<=[\s\"“(])"


def _contraction_rules(
    name: str, stems: tuple[str, ...], suffixes: tuple[str, ...]
) -> list[CorrectionRule]:
    """
    Build the sentence-initial and mid-sentence rules for one stem group.

    The sentence-initial rule only accepts the capitalized stem; the
    mid-sentence rule ignores case.
    """
    suffix_group = _alternation(suffixes)
    capitalized = tuple(stem.capitalize() for stem in stems)
    return [
        CorrectionRule(
            name=f"{name}_initial",
            pattern=re.compile(rf"^({_alternation(capitalized)}) ({suffix_group})\b"),
            replacement=r"\1'\2",
            fields=TRANSLATION_ONLY,
        ),
        CorrectionRule(
            name=f"{name}_mid",
            pattern=re.compile(
                rf"{_MID}({_alternation(stems)}) ({suffix_group})\b", re.IGNORECASE
            ),
            replacement=r"\1'\2",
            fields=TRANSLATION_ONLY,
        ),
    ]


CORRECTION_RULES: tuple[CorrectionRule, ...] = (
    # Character substitution
    CorrectionRule(
        name="apostrophe_confusable",
        pattern=re.compile(rf"(?<=\w)[{APOSTROPHE_CONFUSABLES}](?=\w)"),
        replacement="'",
        fields=TRANSLATION_ONLY,
    ),
    # Contractions, longest stems first
    *_contraction_rules("negation", NEGATION_STEMS, ("t",)),
    CorrectionRule(
        name="first_person",
        pattern=re.compile(r"\bI (ve|ll|m|d)\b"),
        replacement=r"I'\1",
        fields=TRANSLATION_ONLY,
    ),
    *_contraction_rules("plural_pronoun", PLURAL_PRONOUNS, ("re", "ve", "ll", "d")),
    *_contraction_rules("singular_stem", SINGULAR_STEMS, ("ll", "s", "d")),
    *_contraction_rules("lets", ("let",), ("s",)),
    # Confusables for the pronoun "I"
    CorrectionRule(
        name="bar_as_i",
        pattern=re.compile(r"\|(?= )"),
        replacement="I",
        fields=TRANSLATION_ONLY,
    ),
    CorrectionRule(
        name="leading_one_or_l_as_i",
        pattern=re.compile(r"^[1l](?= )"),
        replacement="I",
        fields=TRANSLATION_ONLY,
    ),
    # Script-specific: icon residue in front of the Japanese sentence
    CorrectionRule(
        name="leading_stray_symbols",
        pattern=re.compile(
            rf"^(?:[{FILLER_GLYPHS}]?\s*[{re.escape(STRAY_SYMBOLS)}]\s*)+"
        ),
        replacement="",
        fields=SOURCE_ONLY,
        modes=frozenset({LanguageMode.JAPANESE}),
    ),
)


def rules_for(mode: LanguageMode, text_field: TextField) -> tuple[CorrectionRule, ...]:
    """Return the rules for a mode and field, in application order."""
    return tuple(rule for rule in CORRECTION_RULES if rule.applies_to(mode, text_field))


# ============================================================================
# Correction Functions
# ============================================================================


@dataclass
class CorrectionResult:
    """Result of noise correction."""

    original_text: str
    corrected_text: str
    changes_made: list[tuple[str, str, str]] = field(default_factory=list)  # (rule, old, new)
    passes: int = 0

    @property
    def change_count(self) -> int:
        """Number of corrections made."""
        return len(self.changes_made)

    @property
    def was_modified(self) -> bool:
        """Whether any changes were made."""
        return self.original_text != self.corrected_text


def _apply_pass(
    text: str, rules: tuple[CorrectionRule, ...]
) -> tuple[str, list[tuple[str, str, str]]]:
    """Run every rule once over text, skipping matches in claimed regions."""
    claimed: list[tuple[int, int, str, str]] = []
    for rule in rules:
        for match in rule.pattern.finditer(text):
            start, end = match.span()
            if start == end:
                continue
            if any(start < c_end and c_start < end for c_start, c_end, _, _ in claimed):
                continue
            claimed.append((start, end, match.expand(rule.replacement), rule.name))

    if not claimed:
        return text, []

    claimed.sort()
    pieces = []
    changes = []
    position = 0
    for start, end, replacement, name in claimed:
        pieces.append(text[position:start])
        pieces.append(replacement)
        changes.append((name, text[start:end], replacement))
        position = end
    pieces.append(text[position:])
    return "".join(pieces), changes


def correct_with_report(
    text: str, mode: LanguageMode, text_field: TextField
) -> CorrectionResult:
    """
    Apply the correction table and report what changed.

    Args:
        text: Text of one field.
        mode: Language mode of the pair.
        text_field: Which field the text belongs to.

    Returns:
        CorrectionResult with the corrected text and applied changes.
    """
    rules = rules_for(mode, text_field)
    result = CorrectionResult(original_text=text, corrected_text=text)
    if not rules or not text:
        return result

    current = text
    for _ in range(MAX_PASSES):
        updated, changes = _apply_pass(current, rules)
        result.passes += 1
        if not changes or updated == current:
            break
        result.changes_made.extend(changes)
        current = updated
    else:
        logger.warning("Noise correction did not settle after %d passes: %r", MAX_PASSES, text)

    result.corrected_text = current
    if result.changes_made:
        logger.debug(
            "Corrected %s text (%s): %s",
            text_field.value,
            mode.value,
            ", ".join(f"{old!r}->{new!r}" for _, old, new in result.changes_made),
        )
    return result


def correct(text: str, mode: LanguageMode, text_field: TextField) -> str:
    """
    Apply the correction table to one field's text.

    Pure and idempotent: correct(correct(s)) == correct(s).

    Example:
        >>> correct("I m happy", LanguageMode.SPANISH, TextField.TRANSLATION)
        "I'm happy"
    """
    return correct_with_report(text, mode, text_field).corrected_text
