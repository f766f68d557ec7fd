"""
Tests for deterministic sample generation.
"""

import pytest

from clinote.core.enums import BundleMode, NoteFormat
from clinote.samples import generate_samples


def contents(paths):
    return [p.read_text(encoding="utf-8") for p in paths]


class TestGenerateSamples:
    def test_writes_requested_files(self, tmp_path):
        written = generate_samples(tmp_path / "s", count=3, bundles=2)
        assert [p.name for p in written] == [
            "sample_001.txt",
            "sample_002.txt",
            "sample_003.txt",
            "bundle_001.txt",
            "bundle_002.txt",
        ]
        assert all(p.is_file() for p in written)

    def test_same_seed_same_output(self, tmp_path):
        first = generate_samples(tmp_path / "a", count=4, bundles=2, seed=7)
        second = generate_samples(tmp_path / "b", count=4, bundles=2, seed=7)
        assert contents(first) == contents(second)

    def test_formats_cycle_unless_fixed(self, tmp_path):
        cycled = contents(generate_samples(tmp_path / "c", count=3))
        assert cycled[0].startswith("Subjective:")
        assert cycled[1].startswith("Chief Complaint:")
        assert cycled[2].startswith("Admission Diagnosis:")

        fixed = contents(generate_samples(tmp_path / "f", count=2, note_format=NoteFormat.DISCHARGE))
        assert all(text.startswith("Admission Diagnosis:") for text in fixed)

    def test_zero_count_writes_nothing(self, tmp_path):
        assert generate_samples(tmp_path / "z", count=0) == []

    @pytest.mark.parametrize("count, bundles", [(-1, 0), (0, -1)])
    def test_negative_counts_raise(self, tmp_path, count, bundles):
        with pytest.raises(ValueError):
            generate_samples(tmp_path / "n", count=count, bundles=bundles)


class TestSamplesParseCleanly:
    @pytest.mark.parametrize("note_format", list(NoteFormat))
    def test_single_notes_have_no_warnings(self, pipeline, tmp_path, note_format):
        for path in generate_samples(tmp_path / "s", count=3, note_format=note_format):
            notes = pipeline.process_text(path.read_text(encoding="utf-8"), path.name, note_format)
            assert len(notes) == 1
            assert notes[0].warnings == []
            assert notes[0].unclassified == []

    @pytest.mark.parametrize("note_format", list(NoteFormat))
    def test_bundles_split_into_clean_notes(self, pipeline, tmp_path, note_format):
        for path in generate_samples(tmp_path / "b", count=0, bundles=3, note_format=note_format):
            notes = pipeline.process_text(
                path.read_text(encoding="utf-8"), path.name, note_format, BundleMode.DELIMITER
            )
            assert 2 <= len(notes) <= 4
            assert all(n.warnings == [] for n in notes)
