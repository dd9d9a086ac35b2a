"""
CLI tests, run through click's test runner.
"""

from __future__ import annotations

import json

from click.testing import CliRunner

from exmix.cli import cli

SOURCE = r"""\begin{document}
\begin{ex} Q1 \choice {A}{\True B}{C}{D} \end{ex}
\begin{ex} Q2 \choiceTFt {\True a}{b}{c}{d} \end{ex}
\begin{ex} Q3 \shortans[oly]{5} \end{ex}
\end{document}
"""


def _write_source(tmp_path, name="de.tex", content=SOURCE):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestMixCommand:

    def test_mix_writes_outputs(self, tmp_path):
        source = _write_source(tmp_path)
        out = tmp_path / "out"

        result = CliRunner().invoke(cli, [
            "mix", str(source),
            "--codes", "101,102",
            "-o", str(out),
            "--seed", "1",
            "--log-level", "ERROR",
        ])

        assert result.exit_code == 0, result.output
        mixed = (out / "de_mixed.tex").read_text(encoding="utf-8")
        assert mixed.count(r"\inputansbox") == 6
        assert (out / "de_answer_key.json").exists()
        assert (out / "de_report.json").exists()

    def test_mix_json_output(self, tmp_path):
        source = _write_source(tmp_path)

        result = CliRunner().invoke(cli, [
            "mix", str(source),
            "--codes", "7 8 9",
            "-o", str(tmp_path),
            "--seed", "3",
            "--no-answer-key",
            "--json-output",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [c["code"] for c in data["codes"]] == ["7", "8", "9"]
        assert "text" not in data
        assert data["report"]["total_questions"] == 3
        assert not (tmp_path / "de_answer_key.json").exists()

    def test_mix_requires_codes(self, tmp_path):
        source = _write_source(tmp_path)
        result = CliRunner().invoke(cli, ["mix", str(source)])
        assert result.exit_code != 0

    def test_mix_blank_codes_fails(self, tmp_path):
        source = _write_source(tmp_path)
        result = CliRunner().invoke(cli, [
            "mix", str(source), "--codes", " , ", "-o", str(tmp_path),
        ])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_mix_empty_source_fails(self, tmp_path):
        source = _write_source(tmp_path, content="   \n")
        result = CliRunner().invoke(cli, [
            "mix", str(source), "--codes", "1", "-o", str(tmp_path),
        ])
        assert result.exit_code == 1
        assert "empty" in result.output


class TestBatchCommand:

    def test_batch_mixes_every_source(self, tmp_path):
        sources = tmp_path / "src"
        sources.mkdir()
        _write_source(sources, "a.tex")
        _write_source(sources, "b.tex")
        out = tmp_path / "out"

        result = CliRunner().invoke(cli, [
            "batch", str(sources), "--codes", "1,2", "-o", str(out),
            "--seed", "0",
        ])

        assert result.exit_code == 0, result.output
        assert (out / "a_mixed.tex").exists()
        assert (out / "b_mixed.tex").exists()

    def test_batch_empty_directory(self, tmp_path):
        result = CliRunner().invoke(cli, [
            "batch", str(tmp_path), "--codes", "1",
        ])
        assert result.exit_code == 0
        assert "No .tex files" in result.output

    def test_batch_continues_past_undecodable_source(self, tmp_path):
        sources = tmp_path / "src"
        sources.mkdir()
        _write_source(sources, "a.tex")
        (sources / "b.tex").write_bytes(b"\xff\xfe\\begin{ex} x \\end{ex}")
        _write_source(sources, "c.tex")
        out = tmp_path / "out"

        result = CliRunner().invoke(cli, [
            "batch", str(sources), "--codes", "1", "-o", str(out),
            "--seed", "0",
        ])

        assert result.exit_code == 0, result.output
        assert (out / "a_mixed.tex").exists()
        assert not (out / "b_mixed.tex").exists()
        assert (out / "c_mixed.tex").exists()
        assert "1 failures" in result.output


class TestInspectCommand:

    def test_inspect_lists_questions(self, tmp_path):
        source = _write_source(tmp_path)
        result = CliRunner().invoke(cli, ["inspect", str(source)])

        assert result.exit_code == 0, result.output
        assert "true_false" in result.output
        assert "short_answer" in result.output

    def test_inspect_reports_malformed_block(self, tmp_path):
        source = _write_source(
            tmp_path, content=SOURCE + "\\begin{ex} unterminated\n"
        )
        result = CliRunner().invoke(cli, ["inspect", str(source)])

        assert result.exit_code == 0
        assert "Unterminated" in result.output

    def test_inspect_undecodable_source_fails(self, tmp_path):
        source = tmp_path / "bad.tex"
        source.write_bytes(b"\xff\xfe\\begin{ex} x \\end{ex}")

        result = CliRunner().invoke(cli, ["inspect", str(source)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_inspect_reports_stray_end(self, tmp_path):
        source = _write_source(tmp_path, content=SOURCE + "\\end{ex}\n")
        result = CliRunner().invoke(cli, ["inspect", str(source)])

        assert result.exit_code == 0
        assert "Stray" in result.output
