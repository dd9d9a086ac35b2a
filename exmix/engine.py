"""
Mixer Engine
============
Main orchestrator that combines question extraction, per-code
reconstruction and reporting into a complete mixing pipeline.

Usage:
    engine = MixerEngine(MixerConfig(seed=42))
    result = engine.mix(source_text, ["101", "102"])
    # result.text is the mixed LaTeX document

Architecture:
    source → QuestionExtractor → Questions → Reconstructor (per code:
    Shuffler + Option Parser) → document text → ReportBuilder → MixResult
"""

from __future__ import annotations

import json
import logging
import random
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from . import __version__
from .errors import InputEmptyError, NoCodesSpecifiedError
from .extractor import QuestionExtractor, group_by_type
from .models import MixResult
from .reconstructor import Reconstructor
from .report import ReportBuilder

logger = logging.getLogger(__name__)

CODE_SEPARATORS = re.compile(r"[,;\s]+")


@dataclass
class MixerConfig:
    """Configuration for the mixer engine."""

    # Mixing
    disable_tf_shuffle: bool = False
    seed: Optional[int] = None

    # Output settings
    output_dir: str = "output"
    save_answer_key: bool = True
    save_report: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


def parse_codes(raw: str) -> list[str]:
    """Split a user-typed code list such as ``"101, 102 103"``."""
    return normalize_codes(CODE_SEPARATORS.split(raw))


def normalize_codes(codes: Iterable[str]) -> list[str]:
    """Trim codes and drop empty ones, keeping order and duplicates."""
    return [c.strip() for c in codes if c and c.strip()]


class MixerEngine:
    """
    Main exam mixing engine.

    Orchestrates the full pipeline:
        1. Input checks
        2. Question extraction
        3. Per-code reconstruction
        4. Reporting

    Each call builds fresh components, so one engine can serve
    concurrent callers.
    """

    def __init__(self, config: Optional[MixerConfig] = None):
        self.config = config or MixerConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("exmix")
        package_logger.setLevel(log_level)

        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(formatter)
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)

    def mix(
        self,
        source: str,
        codes: Iterable[str],
        rng: Optional[random.Random] = None,
    ) -> MixResult:
        """
        Generate one exam variant per code from ``source``.

        Args:
            source: ex_test LaTeX document.
            codes: Exam codes, in output order.
            rng: Randomness source; defaults to ``random.Random(config.seed)``.

        Returns:
            MixResult with the mixed document, report and answer keys.

        Raises:
            InputEmptyError: If ``source`` is blank.
            NoCodesSpecifiedError: If no code remains after trimming.
        """
        if not source or not source.strip():
            raise InputEmptyError()

        if isinstance(codes, str):
            code_list = parse_codes(codes)
        else:
            code_list = normalize_codes(codes)
        if not code_list:
            raise NoCodesSpecifiedError()

        if rng is None:
            rng = random.Random(self.config.seed)

        start_time = time.time()
        logger.info(f"Mixing {len(code_list)} exam codes: {', '.join(code_list)}")

        # ── Step 1: Extract questions ─────────────────────────────────
        logger.info("Phase 1: Question extraction")
        extractor = QuestionExtractor()
        questions = extractor.extract(source)

        # ── Step 2: Reconstruct per code ──────────────────────────────
        logger.info("Phase 2: Reconstruction")
        reconstructor = Reconstructor()
        text = reconstructor.build(
            group_by_type(questions),
            code_list,
            disable_tf_shuffle=self.config.disable_tf_shuffle,
            rng=rng,
        )

        # ── Step 3: Report ────────────────────────────────────────────
        logger.info("Phase 3: Report")
        report = ReportBuilder().build(
            questions,
            extractor.warnings + reconstructor.warnings,
            code_list,
        )

        elapsed = time.time() - start_time
        logger.info(
            f"Mix complete in {elapsed:.2f}s, "
            f"{len(questions)} questions × {len(code_list)} codes"
        )

        return MixResult(
            text=text,
            report=report,
            codes=reconstructor.code_summaries,
            answer_keys=reconstructor.answer_keys,
            engine_version=__version__,
        )

    def mix_file(self, source_path: str, codes: Iterable[str]) -> MixResult:
        """
        Mix a ``.tex`` file and save the outputs under ``config.output_dir``.

        Raises:
            FileNotFoundError: If the source file doesn't exist.
        """
        path = Path(source_path)
        if not path.exists():
            raise FileNotFoundError(f"Source not found: {source_path}")

        logger.info(f"Reading source: {path}")
        source = path.read_text(encoding="utf-8")
        result = self.mix(source, codes)

        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        tex_file = output_dir / f"{path.stem}_mixed.tex"
        tex_file.write_text(result.text, encoding="utf-8")
        logger.info(f"Saved mixed document: {tex_file}")

        if self.config.save_answer_key:
            key_file = output_dir / f"{path.stem}_answer_key.json"
            self._save_json_dict(
                [k.model_dump(mode="json") for k in result.answer_keys], key_file
            )

        if self.config.save_report:
            report_file = output_dir / f"{path.stem}_report.json"
            self._save_json_dict(result.report.model_dump(mode="json"), report_file)

        return result

    def _save_json_dict(self, data, filepath: Path):
        """Save JSON-serializable data to a file."""
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            logger.info(f"Saved JSON: {filepath}")
        except OSError as e:
            logger.error(f"Failed to save JSON: {e}")
