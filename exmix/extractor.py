"""
Question Extractor
==================
Scans an ex_test source document for ``\\begin{ex} ... \\end{ex}`` blocks
and classifies each one by the choice command it contains.
"""

from __future__ import annotations

import logging

from .models import MixWarning, Question, QuestionType, WarningType

logger = logging.getLogger(__name__)

# ─── Markers ──────────────────────────────────────────────────────────────────

BLOCK_BEGIN = "\\begin{ex}"
BLOCK_END = "\\end{ex}"

# Checked in this order; \choiceTF also covers the \choiceTFt spelling and
# must win over the \choice prefix it contains.
TRUE_FALSE_MARKER = "\\choiceTF"
MULTIPLE_CHOICE_MARKER = "\\choice"
SHORT_ANSWER_MARKER = "\\shortans"

PART_ORDER = (
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.TRUE_FALSE,
    QuestionType.SHORT_ANSWER,
)


def classify(inner_text: str) -> QuestionType:
    """Pick the question type from the text between the block delimiters."""
    if TRUE_FALSE_MARKER in inner_text:
        return QuestionType.TRUE_FALSE
    if MULTIPLE_CHOICE_MARKER in inner_text:
        return QuestionType.MULTIPLE_CHOICE
    if SHORT_ANSWER_MARKER in inner_text:
        return QuestionType.SHORT_ANSWER
    # Free response
    return QuestionType.SHORT_ANSWER


def group_by_type(
    questions: list[Question],
) -> dict[QuestionType, list[Question]]:
    """Split questions into the three parts, keeping extraction order."""
    groups: dict[QuestionType, list[Question]] = {t: [] for t in PART_ORDER}
    for q in questions:
        groups[q.type].append(q)
    return groups


class QuestionExtractor:
    """
    Turns source text into an ordered list of Question records.

    Blocks are matched non-greedily: each begin pairs with the first end
    after it. Nested blocks are not supported. A begin that meets another
    begin before its end is reported and skipped, as is any end outside a
    block.
    """

    def __init__(self):
        self.questions: list[Question] = []
        self.warnings: list[MixWarning] = []

    def reset(self):
        """Reset state for a fresh extraction run."""
        self.questions = []
        self.warnings = []

    def extract(self, source: str) -> list[Question]:
        """Extract all complete blocks from ``source``."""
        self.reset()

        cursor = 0
        while True:
            begin = source.find(BLOCK_BEGIN, cursor)
            self._warn_stray_ends(
                source, cursor, len(source) if begin == -1 else begin
            )
            if begin == -1:
                break

            inner_start = begin + len(BLOCK_BEGIN)
            end = source.find(BLOCK_END, inner_start)
            if end == -1:
                self._warn_unterminated(source, begin)
                break

            # Another begin before this end: the first block is never closed
            next_begin = source.find(BLOCK_BEGIN, inner_start)
            if next_begin != -1 and next_begin < end:
                self._warn_unterminated(source, begin)
                cursor = next_begin
                continue

            block_end = end + len(BLOCK_END)
            inner = source[inner_start:end]
            question = Question(
                full_text=source[begin:block_end],
                type=classify(inner),
                sequence_id=len(self.questions) + 1,
                start=begin,
                end=block_end,
            )
            logger.debug(
                f"Extracted question {question.sequence_id} "
                f"({question.type.value}) at offset {begin}"
            )
            self.questions.append(question)
            cursor = block_end

        logger.info(f"Extracted {len(self.questions)} question blocks")
        return self.questions

    def _warn_unterminated(self, source: str, begin: int):
        self._warn_malformed(
            source, begin, f"Unterminated {BLOCK_BEGIN}", "block skipped"
        )

    def _warn_stray_ends(self, source: str, start: int, stop: int):
        """Flag end delimiters found outside any block."""
        pos = source.find(BLOCK_END, start, stop)
        while pos != -1:
            self._warn_malformed(source, pos, f"Stray {BLOCK_END}", "ignored")
            pos = source.find(BLOCK_END, pos + len(BLOCK_END), stop)

    def _warn_malformed(self, source: str, offset: int, what: str, outcome: str):
        line = source.count("\n", 0, offset) + 1
        message = f"{what} at line {line}; {outcome}"
        logger.warning(message)
        self.warnings.append(MixWarning(
            type=WarningType.MALFORMED_BLOCK,
            message=message,
            context={"offset": offset, "line": line},
        ))
