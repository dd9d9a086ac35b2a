"""
Data Models
===========
Pydantic models for exam mixing input records and output reports.
All report models are serializable to JSON for downstream tooling.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

CORRECT_MARKER = "\\True"


# ─── Enums ────────────────────────────────────────────────────────────────────


class QuestionType(str, Enum):
    """Question category; also decides which exam part a question lands in."""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"


class WarningType(str, Enum):
    """Non-fatal problems found while mixing."""
    MALFORMED_BLOCK = "malformed_block"
    OPTION_COMMAND_NOT_FOUND = "option_command_not_found"
    OPTION_OVERFLOW = "option_overflow"
    MISSING_CORRECT_MARKER = "missing_correct_marker"
    DUPLICATE_CODE = "duplicate_code"


# ─── Source Records ───────────────────────────────────────────────────────────


class Question(BaseModel):
    """
    One ``ex`` block lifted verbatim from the source document.
    """
    full_text: str = Field(
        description="Verbatim block, begin/end delimiters included"
    )
    type: QuestionType
    sequence_id: int = Field(
        ge=1,
        description="Extraction order, for debugging only"
    )
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)


class Option(BaseModel):
    """A single answer option inside a choice command."""
    model_config = ConfigDict(frozen=True)

    text: str
    is_correct: bool = False
    raw: Optional[str] = Field(
        default=None,
        description="Verbatim brace group; None once the option was reordered"
    )

    def normalized(self) -> str:
        marker = CORRECT_MARKER + " " if self.is_correct else ""
        return "{" + marker + self.text + "}"

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        return self.normalized()


class ChoiceSite(BaseModel):
    """
    A question split around its choice command.

    ``render()`` is plain concatenation of the fields, so a site that was
    never reordered reproduces its input text exactly.
    """
    model_config = ConfigDict(frozen=True)

    prefix: str
    command: str = ""
    arg_gap: str = ""
    optional_arg: str = ""
    options: tuple[Option, ...] = ()
    separators: tuple[str, ...] = ()
    suffix: str = ""
    truncated: bool = False

    @property
    def has_command(self) -> bool:
        return bool(self.command)

    def render(self) -> str:
        parts = [self.prefix, self.command, self.arg_gap, self.optional_arg]
        for separator, option in zip(self.separators, self.options):
            parts.append(separator)
            parts.append(option.render())
        parts.append(self.suffix)
        return "".join(parts)

    def reorder(self, order: list[int]) -> ChoiceSite:
        """
        Return a copy whose options follow ``order`` (indices into the
        current options). Reordered options are emitted in normalized form;
        separators keep their slot.
        """
        if sorted(order) != list(range(len(self.options))):
            raise ValueError(f"Not a permutation of the options: {order}")
        options = tuple(
            Option(text=self.options[i].text,
                   is_correct=self.options[i].is_correct)
            for i in order
        )
        return self.model_copy(update={"options": options})


# ─── Warnings ─────────────────────────────────────────────────────────────────


class MixWarning(BaseModel):
    """A non-fatal problem surfaced without aborting the batch."""
    type: WarningType
    message: str
    sequence_id: Optional[int] = None
    context: Optional[dict] = None


# ─── Per-Code Output Models ───────────────────────────────────────────────────


class PartSummary(BaseModel):
    """What one part of one exam code contains."""
    part: int = Field(ge=1, le=3)
    question_type: QuestionType
    count: int = Field(ge=0)
    file_id: str
    columns: int


class CodeSummary(BaseModel):
    """All three parts generated for a single exam code."""
    code: str
    parts: list[PartSummary] = Field(default_factory=list)

    @computed_field
    @property
    def total_questions(self) -> int:
        return sum(p.count for p in self.parts)


class AnswerKeyEntry(BaseModel):
    part: int = Field(ge=1, le=3)
    number: int = Field(ge=1)
    sequence_id: int
    answer: str = ""


class AnswerKey(BaseModel):
    """Correct answers for one exam code, in printed order."""
    code: str
    entries: list[AnswerKeyEntry] = Field(default_factory=list)

    def for_part(self, part: int) -> list[AnswerKeyEntry]:
        return [e for e in self.entries if e.part == part]


# ─── Report / Result Models ───────────────────────────────────────────────────


class MixReport(BaseModel):
    """Post-mix summary report."""
    total_questions: int = 0
    questions_by_type: dict[str, int] = Field(default_factory=dict)
    codes: list[str] = Field(default_factory=list)
    warnings: list[MixWarning] = Field(default_factory=list)

    @computed_field
    @property
    def warning_breakdown(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for warning in self.warnings:
            key = warning.type.value
            counts[key] = counts.get(key, 0) + 1
        return counts

    @computed_field
    @property
    def is_clean(self) -> bool:
        return not self.warnings


class MixResult(BaseModel):
    """
    Complete output of a mix run: the reconstructed document plus
    everything needed to audit it.
    """
    text: str
    report: MixReport = Field(default_factory=MixReport)
    codes: list[CodeSummary] = Field(default_factory=list)
    answer_keys: list[AnswerKey] = Field(default_factory=list)
    engine_version: str = "1.0.0"
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
