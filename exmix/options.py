"""
Option Parser
=============
Splits a question around its choice command and pulls out the option
groups that follow it.

    \\choice[2]  {A. first}{\\True second}{third}{fourth}
    └─command┘└arg┘└──────────── options (at most 4) ──────┘
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import CORRECT_MARKER, ChoiceSite, Option, QuestionType
from .tokenizer import read_group, skip_whitespace

logger = logging.getLogger(__name__)

MULTIPLE_CHOICE_COMMAND = "\\choice"
TRUE_FALSE_COMMANDS = ("\\choiceTFt", "\\choiceTF")
SHORT_ANSWER_COMMAND = "\\shortans"

MAX_OPTIONS = 4

# "A." / "b)" typed by hand in front of an option
LABEL_PATTERN = re.compile(r"^[A-Da-d][.)]")


def resolve_command(text: str, question_type: QuestionType) -> str:
    """Choose the command spelling to look for in ``text``."""
    if question_type == QuestionType.TRUE_FALSE:
        for command in TRUE_FALSE_COMMANDS:
            if find_command(text, command) != -1:
                return command
        return TRUE_FALSE_COMMANDS[-1]
    return MULTIPLE_CHOICE_COMMAND


def find_command(text: str, command: str, start: int = 0) -> int:
    """
    Index of the first ``command`` in ``text`` that is a whole control
    word, i.e. not followed by another letter. -1 if absent.
    """
    pos = text.find(command, start)
    while pos != -1:
        after = pos + len(command)
        if after >= len(text) or not text[after].isalpha():
            return pos
        pos = text.find(command, pos + 1)
    return -1


def clean_option(inner: str) -> Option:
    """Build an Option from the text between an option's braces."""
    text = inner.strip()
    is_correct = False
    if text.startswith(CORRECT_MARKER) and not _letter_at(
        text, len(CORRECT_MARKER)
    ):
        is_correct = True
        text = text[len(CORRECT_MARKER):].strip()

    label = LABEL_PATTERN.match(text)
    if label:
        text = text[label.end():].strip()

    return Option(text=text, is_correct=is_correct)


def read_optional_arg(text: str, pos: int) -> tuple[str, str, int]:
    """
    Read ``[...]`` after optional whitespace.

    Returns (gap, argument, new_pos). When there is no complete bracketed
    argument, gap and argument are empty and the cursor does not move.
    """
    start = skip_whitespace(text, pos)
    if start < len(text) and text[start] == "[":
        close = text.find("]", start)
        if close != -1:
            return text[pos:start], text[start:close + 1], close + 1
    return "", "", pos


def parse_choices(question_text: str, question_type: QuestionType) -> ChoiceSite:
    """
    Split ``question_text`` into a ChoiceSite.

    A question without the expected command comes back as a site with no
    options whose ``render()`` returns the text unchanged.
    """
    command = resolve_command(question_text, question_type)
    index = find_command(question_text, command)
    if index == -1:
        logger.debug(f"No {command} found in question text")
        return ChoiceSite(prefix=question_text)

    pos = index + len(command)
    arg_gap, optional_arg, pos = read_optional_arg(question_text, pos)

    options: list[Option] = []
    separators: list[str] = []
    while len(options) < MAX_OPTIONS:
        group_start = skip_whitespace(question_text, pos)
        group = read_group(question_text, group_start)
        if group is None:
            break
        separators.append(question_text[pos:group_start])
        option = clean_option(group.inner)
        options.append(option.model_copy(update={"raw": group.text}))
        pos = group.end

    truncated = False
    if len(options) == MAX_OPTIONS:
        following = skip_whitespace(question_text, pos)
        truncated = read_group(question_text, following) is not None

    return ChoiceSite(
        prefix=question_text[:index],
        command=command,
        arg_gap=arg_gap,
        optional_arg=optional_arg,
        options=tuple(options),
        separators=tuple(separators),
        suffix=question_text[pos:],
        truncated=truncated,
    )


def parse_short_answer(question_text: str) -> Optional[str]:
    """Content of the first ``\\shortans[..]{...}`` group, if any."""
    index = find_command(question_text, SHORT_ANSWER_COMMAND)
    if index == -1:
        return None
    _, _, pos = read_optional_arg(
        question_text, index + len(SHORT_ANSWER_COMMAND)
    )
    group = read_group(question_text, skip_whitespace(question_text, pos))
    if group is None:
        return None
    return group.inner.strip()


def _letter_at(text: str, pos: int) -> bool:
    return pos < len(text) and text[pos].isalpha()
