"""
Report Builder
==============
Post-mix summary.

After each mix run, collects:
    - Total Questions Extracted
    - Questions per Part
    - Exam Codes Generated
    - Warnings (malformed blocks, missing choice commands, option
      overflow, missing correct markers, duplicate codes)

Never aborts the run; everything it finds is reported and logged.
"""

from __future__ import annotations

import logging
from collections import Counter

from .extractor import PART_ORDER
from .models import MixReport, MixWarning, Question

logger = logging.getLogger(__name__)


class ReportBuilder:
    """
    Aggregates extraction and reconstruction results into a MixReport.
    """

    def build(
        self,
        questions: list[Question],
        warnings: list[MixWarning],
        codes: list[str],
    ) -> MixReport:
        """
        Build the report for one mix run.

        Args:
            questions: Questions extracted from the source.
            warnings: Warnings raised by the extractor and reconstructor.
            codes: Exam codes that were generated, in output order.

        Returns:
            MixReport summarising the run.
        """
        type_counts = Counter(q.type for q in questions)
        report = MixReport(
            total_questions=len(questions),
            questions_by_type={
                t.value: type_counts.get(t, 0) for t in PART_ORDER
            },
            codes=list(codes),
            warnings=list(warnings),
        )

        if not questions:
            logger.warning("No questions found in source document")

        # Log summary
        logger.info("=" * 60)
        logger.info("MIX REPORT")
        logger.info("=" * 60)
        logger.info(f"Total Questions: {report.total_questions}")
        for type_name, count in report.questions_by_type.items():
            logger.info(f"  • {type_name}: {count}")
        logger.info(f"Exam Codes: {', '.join(report.codes)}")
        logger.info(f"Warnings: {len(report.warnings)}")

        if report.warning_breakdown:
            logger.info("Warning Breakdown:")
            for warning_type, count in sorted(
                report.warning_breakdown.items()
            ):
                logger.info(f"  • {warning_type}: {count}")

        logger.info("=" * 60)

        return report
