"""
Reconstructor
=============
Rebuilds the exam document once per exam code and appends a shared
answer appendix.

Output layout:
    PREAMBLE
    for each code:   header → part I → part II → part III
                     (each part: intro, open answer file, questions, close)
    appendix:        one \\inputansbox per code and part
    CLOSING

The answer-file identifier opened in a code's body is the same one the
appendix renders, so every code's recorded answers stay addressable.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from typing import Optional

from . import templates
from .errors import NoCodesSpecifiedError
from .extractor import PART_ORDER
from .models import (
    AnswerKey,
    AnswerKeyEntry,
    ChoiceSite,
    CodeSummary,
    MixWarning,
    PartSummary,
    Question,
    QuestionType,
    WarningType,
)
from .options import parse_choices, parse_short_answer
from .shuffler import permutation, permute

logger = logging.getLogger(__name__)

Prepared = list[tuple[Question, Optional[ChoiceSite]]]


class Reconstructor:
    """
    Emits the mixed document. After ``build`` the per-code summaries,
    answer keys and any warnings are available as attributes.
    """

    def __init__(self):
        self.warnings: list[MixWarning] = []
        self.code_summaries: list[CodeSummary] = []
        self.answer_keys: list[AnswerKey] = []

    def reset(self):
        self.warnings = []
        self.code_summaries = []
        self.answer_keys = []

    def build(
        self,
        questions_by_type: dict[QuestionType, list[Question]],
        codes: list[str],
        disable_tf_shuffle: bool = False,
        rng: Optional[random.Random] = None,
    ) -> str:
        """
        Render every code plus the appendix into one document.

        Args:
            questions_by_type: Questions grouped per part, in source order.
            codes: Exam codes; output follows this order.
            disable_tf_shuffle: Keep true/false statements in source order.
            rng: Randomness source; module-level ``random`` if omitted.

        Raises:
            NoCodesSpecifiedError: If ``codes`` is empty.
        """
        if not codes:
            raise NoCodesSpecifiedError()

        self.reset()
        prepared = self._prepare(questions_by_type)
        self._check_duplicate_codes(codes)

        sections = [templates.PREAMBLE]
        for code in codes:
            sections.append(
                self._build_code(code, prepared, disable_tf_shuffle, rng)
            )
        sections.append(self._build_appendix(codes))
        sections.append(templates.CLOSING)

        logger.info(
            f"Built {len(codes)} exam codes from "
            f"{sum(len(group) for group in prepared.values())} questions"
        )
        return "".join(sections)

    # ─── Preparation ─────────────────────────────────────────────────────

    def _prepare(
        self,
        questions_by_type: dict[QuestionType, list[Question]],
    ) -> dict[QuestionType, Prepared]:
        """Parse each choice question once; short answers carry no site."""
        prepared: dict[QuestionType, Prepared] = {}
        for question_type in PART_ORDER:
            group: Prepared = []
            for q in questions_by_type.get(question_type, []):
                site = None
                if question_type != QuestionType.SHORT_ANSWER:
                    site = parse_choices(q.full_text, question_type)
                    self._inspect_site(q, site)
                group.append((q, site))
            prepared[question_type] = group
        return prepared

    def _inspect_site(self, question: Question, site: ChoiceSite):
        if not site.has_command:
            self._warn(
                WarningType.OPTION_COMMAND_NOT_FOUND,
                f"Question {question.sequence_id}: choice command not found, "
                f"options left in place",
                question.sequence_id,
            )
            return

        if site.truncated:
            self._warn(
                WarningType.OPTION_OVERFLOW,
                f"Question {question.sequence_id}: more than "
                f"{len(site.options)} options, extras kept unshuffled",
                question.sequence_id,
                {"command": site.command},
            )

        if (
            question.type == QuestionType.MULTIPLE_CHOICE
            and site.options
            and not any(o.is_correct for o in site.options)
        ):
            self._warn(
                WarningType.MISSING_CORRECT_MARKER,
                f"Question {question.sequence_id}: no option marked correct",
                question.sequence_id,
            )

    def _check_duplicate_codes(self, codes: list[str]):
        for code, count in Counter(codes).items():
            if count > 1:
                self._warn(
                    WarningType.DUPLICATE_CODE,
                    f"Exam code {code!r} requested {count} times; "
                    f"its answer files are overwritten by the last copy",
                    context={"code": code, "count": count},
                )

    def _warn(
        self,
        warning_type: WarningType,
        message: str,
        sequence_id: Optional[int] = None,
        context: Optional[dict] = None,
    ):
        logger.warning(message)
        self.warnings.append(MixWarning(
            type=warning_type,
            message=message,
            sequence_id=sequence_id,
            context=context,
        ))

    # ─── Per-code sections ───────────────────────────────────────────────

    def _build_code(
        self,
        code: str,
        prepared: dict[QuestionType, Prepared],
        disable_tf_shuffle: bool,
        rng: Optional[random.Random],
    ) -> str:
        summary = CodeSummary(code=code)
        key = AnswerKey(code=code)
        lines = [templates.CODE_HEADER.format(code=code)]

        for part, question_type in enumerate(PART_ORDER, start=1):
            group = permute(prepared[question_type], rng)
            file_id = templates.file_id(code, part)

            blocks = []
            for number, (question, site) in enumerate(group, start=1):
                text, answer = self._render_question(
                    question, site, disable_tf_shuffle, rng
                )
                blocks.append(text)
                key.entries.append(AnswerKeyEntry(
                    part=part,
                    number=number,
                    sequence_id=question.sequence_id,
                    answer=answer,
                ))

            intro = templates.PART_INTRO if group else templates.PART_INTRO_EMPTY
            lines.append(intro.format(
                numeral=templates.PART_NUMERALS[part],
                title=templates.PART_TITLES[question_type],
                count=len(group),
            ))
            lines.append(templates.OPEN_ANSWER_FILE.format(file_id=file_id))
            if blocks:
                lines.append(templates.QUESTION_SEPARATOR.join(blocks) + "\n")
            lines.append(templates.CLOSE_ANSWER_FILE)

            summary.parts.append(PartSummary(
                part=part,
                question_type=question_type,
                count=len(group),
                file_id=file_id,
                columns=templates.ANSWER_COLUMNS[question_type],
            ))
            logger.debug(f"Code {code} part {part}: {len(group)} questions")

        self.code_summaries.append(summary)
        self.answer_keys.append(key)
        return "".join(lines)

    def _render_question(
        self,
        question: Question,
        site: Optional[ChoiceSite],
        disable_tf_shuffle: bool,
        rng: Optional[random.Random],
    ) -> tuple[str, str]:
        """Return the question text for this code and its answer."""
        if site is None:
            return question.full_text, parse_short_answer(question.full_text) or ""
        if not site.has_command:
            return question.full_text, ""

        if question.type == QuestionType.MULTIPLE_CHOICE or not disable_tf_shuffle:
            site = site.reorder(permutation(len(site.options), rng))

        return site.render(), answer_for(question.type, site)

    # ─── Appendix ────────────────────────────────────────────────────────

    def _build_appendix(self, codes: list[str]) -> str:
        lines = [templates.APPENDIX_HEADER]
        for code in codes:
            lines.append(templates.APPENDIX_CODE_LABEL.format(code=code))
            for part, question_type in enumerate(PART_ORDER, start=1):
                lines.append(templates.RENDER_ANSWERS.format(
                    columns=templates.ANSWER_COLUMNS[question_type],
                    file_id=templates.file_id(code, part),
                ))
        return "".join(lines)


def answer_for(question_type: QuestionType, site: ChoiceSite) -> str:
    """Answer-key string for a choice site in its printed option order."""
    if question_type == QuestionType.TRUE_FALSE:
        return "".join(
            templates.TF_TRUE if o.is_correct else templates.TF_FALSE
            for o in site.options
        )
    return "".join(
        templates.OPTION_LETTERS[i]
        for i, o in enumerate(site.options)
        if o.is_correct
    )
