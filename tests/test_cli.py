"""
Tests for the command-line interface: dispatch, output and exit codes.
"""

import io
import json
import sys

import pytest
from loguru import logger

from clinote.cli import create_argument_parser, main


@pytest.fixture(autouse=True)
def restore_logger():
    """main() swaps loguru sinks onto the captured stderr; put the default back."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def note_file(tmp_path):
    path = tmp_path / "visit.txt"
    path.write_text("Patient reports headache.\nPlan: rest and fluids.\n", encoding="utf-8")
    return path


class TestParser:
    def test_subcommand_is_required(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args([])

    def test_rejects_unknown_format(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(
                ["parse", "--input", "a", "--format", "progress", "--out", "b", "--out-format", "json"]
            )

    def test_heuristics_flag_is_tri_state(self):
        parser = create_argument_parser()
        base = ["parse", "--input", "a", "--format", "hp", "--out", "b", "--out-format", "json"]
        assert parser.parse_args(base).heuristics is None
        assert parser.parse_args(base + ["--heuristics"]).heuristics is True
        assert parser.parse_args(base + ["--no-heuristics"]).heuristics is False


class TestParseCommand:
    def test_writes_json(self, note_file, tmp_path, capsys):
        out = tmp_path / "visit.json"
        code = main(["parse", "--input", str(note_file), "--format", "hp", "--out", str(out), "--out-format", "json"])
        assert code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data[0]["sections"] == {"Plan": "rest and fluids."}
        assert data[0]["unclassified"] == ["Patient reports headache."]
        assert "Wrote 1 note(s) with 1 warning(s)" in capsys.readouterr().out

    def test_heuristics_flag(self, note_file, tmp_path):
        out = tmp_path / "visit.json"
        main(["parse", "--input", str(note_file), "--format", "hp", "--out", str(out),
              "--out-format", "json", "--heuristics"])
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data[0]["sections"]["Chief Complaint"] == "Patient reports headache."

    def test_missing_input_exits_1(self, tmp_path):
        code = main(["parse", "--input", str(tmp_path / "nope.txt"), "--format", "hp",
                     "--out", str(tmp_path / "o.json"), "--out-format", "json"])
        assert code == 1
        assert not (tmp_path / "o.json").exists()

    def test_invalid_config_exits_2(self, note_file, tmp_path):
        config = tmp_path / "bad.json"
        config.write_text("{broken", encoding="utf-8")
        code = main(["parse", "--input", str(note_file), "--format", "hp", "--out", str(tmp_path / "o.json"),
                     "--out-format", "json", "--config", str(config)])
        assert code == 2

    def test_interactive_review(self, note_file, tmp_path, monkeypatch, capsys):
        # heuristics? yes, then keep both candidates
        monkeypatch.setattr(sys, "stdin", io.StringIO("y\n\n\n"))
        out = tmp_path / "visit.md"
        code = main(["parse", "--input", str(note_file), "--format", "hp", "--out", str(out),
                     "--out-format", "markdown", "--interactive"])
        assert code == 0
        text = out.read_text(encoding="utf-8")
        assert "### Chief Complaint\n\nPatient reports headache." in text
        assert "Reviewing note 1" in capsys.readouterr().out


class TestBatchCommand:
    def test_partial_failure_exits_1_and_writes_report(self, tmp_path, soap_note_text, capsys):
        in_dir = tmp_path / "in"
        in_dir.mkdir()
        (in_dir / "good.txt").write_text(soap_note_text, encoding="utf-8")
        (in_dir / "bad.txt").write_bytes(b"\xff\xfe broken")
        out_dir = tmp_path / "out"

        code = main(["batch", "--input-dir", str(in_dir), "--format", "soap",
                     "--out-dir", str(out_dir), "--out-format", "csv"])

        assert code == 1
        report = json.loads((out_dir / "batch_report.json").read_text(encoding="utf-8"))
        assert report["summary"]["files_succeeded"] == 1
        assert report["summary"]["files_failed"] == 1
        assert (out_dir / "good.csv").is_file()
        assert "FAILED" in capsys.readouterr().out

    def test_clean_batch_exits_0(self, tmp_path, soap_note_text):
        in_dir = tmp_path / "in"
        in_dir.mkdir()
        (in_dir / "good.txt").write_text(soap_note_text, encoding="utf-8")
        code = main(["batch", "--input-dir", str(in_dir), "--format", "soap",
                     "--out-dir", str(tmp_path / "out"), "--out-format", "json"])
        assert code == 0

    def test_bad_glob_exits_1(self, tmp_path):
        in_dir = tmp_path / "in"
        in_dir.mkdir()
        code = main(["batch", "--input-dir", str(in_dir), "--glob", "../*.txt", "--format", "soap",
                     "--out-dir", str(tmp_path / "out"), "--out-format", "json"])
        assert code == 1
        assert not (tmp_path / "out").exists()


class TestSampleAndValidate:
    def test_sample_then_batch(self, tmp_path):
        samples = tmp_path / "samples"
        assert main(["sample", "--out-dir", str(samples), "--n", "3", "--format", "soap"]) == 0
        assert len(list(samples.glob("*.txt"))) == 3
        assert main(["batch", "--input-dir", str(samples), "--format", "soap",
                     "--out-dir", str(tmp_path / "out"), "--out-format", "json"]) == 0

    def test_sample_negative_count_exits_1(self, tmp_path):
        assert main(["sample", "--out-dir", str(tmp_path / "s"), "--n", "-1"]) == 1

    def test_validate_prints_summary(self, tmp_path, capsys):
        config = tmp_path / "clinote.json"
        config.write_text(json.dumps({"enable_fallback_heuristics": True}), encoding="utf-8")
        assert main(["validate", "--config", str(config)]) == 0
        assert "fallback heuristics:     enabled" in capsys.readouterr().out

    def test_validate_rejects_bad_regex(self, tmp_path):
        config = tmp_path / "clinote.json"
        config.write_text(json.dumps({"bundle_delimiter_pattern": "("}), encoding="utf-8")
        assert main(["validate", "--config", str(config)]) == 2
