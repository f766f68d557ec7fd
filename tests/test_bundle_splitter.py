"""
Tests for bundle splitting strategies and the BundleSplitter facade.
"""

import pytest

from clinote.bundling import BundleSplitter, DelimiterSplitStrategy, StructuralSplitStrategy
from clinote.core.config import ClinoteSettings
from clinote.core.enums import BundleMode, NoteFormat, WarningStage


@pytest.fixture
def splitter(settings):
    return BundleSplitter(settings)


class TestSingleMode:
    """Whole document is one note."""

    def test_returns_whole_document(self, splitter, soap_bundle_text):
        result = splitter.split(soap_bundle_text, BundleMode.SINGLE, NoteFormat.SOAP)
        assert result.notes == [soap_bundle_text.strip()]
        assert result.warnings == []

    def test_never_warns_on_empty_document(self, splitter):
        result = splitter.split("", BundleMode.SINGLE, NoteFormat.SOAP)
        assert result.notes == [""]
        assert result.warnings == []

    def test_default_mode_comes_from_settings(self):
        splitter = BundleSplitter(ClinoteSettings(_env_file=None, default_bundle_mode="delimiter"))
        result = splitter.split("A\n---\nB", None, NoteFormat.SOAP)
        assert result.notes == ["A", "B"]


class TestDelimiterMode:
    """Split on boundary lines."""

    def test_leading_delimiter_yields_two_notes_without_warnings(self, splitter):
        result = splitter.split("---\nNote A\n---\nNote B", BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.notes == ["Note A", "Note B"]
        assert result.warnings == []

    def test_three_note_bundle(self, splitter, soap_bundle_text):
        result = splitter.split(soap_bundle_text, BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.note_count == 3
        assert "sore throat" in result.notes[0]
        assert "ear pain" in result.notes[1]
        assert "cough" in result.notes[2]

    def test_missing_delimiter_warns_and_keeps_single_note(self, splitter):
        result = splitter.split("Plan: rest.", BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.notes == ["Plan: rest."]
        assert len(result.warnings) == 1
        assert result.warnings[0].stage == WarningStage.BUNDLE_SPLIT

    def test_delimiter_must_fill_the_whole_line(self, splitter):
        text = "Plan: rest --- fluids\nAssessment: ok"
        result = splitter.split(text, BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.note_count == 1
        assert len(result.warnings) == 1

    def test_indented_delimiter_counts(self, splitter):
        result = splitter.split("A\n   ---   \nB", BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.notes == ["A", "B"]

    def test_consecutive_delimiters_skip_empty_chunks(self, splitter):
        result = splitter.split("A\n---\n\n---\nB\n---", BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.notes == ["A", "B"]
        assert result.warnings == []

    def test_only_delimiters_gives_one_empty_note_with_warning(self, splitter):
        result = splitter.split("---\n---\n", BundleMode.DELIMITER, NoteFormat.SOAP)
        assert result.notes == [""]
        assert result.warnings[0].message == "bundle contained no note content"

    def test_custom_delimiter_pattern(self):
        settings = ClinoteSettings(_env_file=None, bundle_delimiter_pattern=r"=+ NEXT NOTE =+")
        strategy = DelimiterSplitStrategy(settings)
        result = strategy.split("A\n=== NEXT NOTE ===\nB", NoteFormat.SOAP)
        assert result.notes == ["A", "B"]

    def test_resplitting_joined_notes_is_idempotent(self, splitter, soap_bundle_text):
        first = splitter.split(soap_bundle_text, BundleMode.DELIMITER, NoteFormat.SOAP)
        rejoined = "\n---\n".join(first.notes)
        second = splitter.split(rejoined, BundleMode.DELIMITER, NoteFormat.SOAP)
        assert second.notes == first.notes
        assert second.warnings == []


class TestStructuralMode:
    """Split where the leading section heading recurs."""

    def test_splits_on_recurring_leading_marker(self, splitter):
        text = (
            "Chief Complaint: Cough.\nPlan: Rest.\n"
            "Chief Complaint: Fever.\nPlan: Fluids.\n"
        )
        result = splitter.split(text, BundleMode.STRUCTURAL, NoteFormat.HP)
        assert result.notes == [
            "Chief Complaint: Cough.\nPlan: Rest.",
            "Chief Complaint: Fever.\nPlan: Fluids.",
        ]
        assert result.warnings == []

    def test_first_marker_does_not_split_and_preamble_stays_with_first_note(self, splitter):
        text = "Clinic visit 2024-01-02\nSubjective: tired.\nPlan: sleep.\nSubjective: better.\n"
        result = splitter.split(text, BundleMode.STRUCTURAL, NoteFormat.SOAP)
        assert result.note_count == 2
        assert result.notes[0].startswith("Clinic visit 2024-01-02")
        assert result.notes[1] == "Subjective: better."

    def test_marker_alias_is_recognized(self, splitter):
        text = "CC: Cough.\nPlan: Rest.\nReason for Visit: Fever.\nPlan: Fluids."
        result = splitter.split(text, BundleMode.STRUCTURAL, NoteFormat.HP)
        assert result.note_count == 2

    def test_missing_marker_warns(self):
        result = StructuralSplitStrategy().split("Plan: rest only.", NoteFormat.DISCHARGE)
        assert result.notes == ["Plan: rest only."]
        assert len(result.warnings) == 1
        assert "Discharge Diagnosis" in result.warnings[0].message
        assert result.warnings[0].stage == WarningStage.BUNDLE_SPLIT

    def test_discharge_splits_without_optional_admission_diagnosis(self, splitter):
        text = (
            "Discharge Diagnosis: Pneumonia.\nHospital Course: Antibiotics.\n"
            "Discharge Diagnosis: Cellulitis.\nHospital Course: Cefazolin.\n"
        )
        result = splitter.split(text, BundleMode.STRUCTURAL, NoteFormat.DISCHARGE)
        assert result.notes == [
            "Discharge Diagnosis: Pneumonia.\nHospital Course: Antibiotics.",
            "Discharge Diagnosis: Cellulitis.\nHospital Course: Cefazolin.",
        ]
        assert result.warnings == []

    def test_admission_diagnosis_opens_the_next_note(self, splitter):
        text = (
            "Admission Diagnosis: CAP.\nDischarge Diagnosis: Pneumonia.\nHospital Course: Antibiotics.\n"
            "Admission Diagnosis: UTI.\nDischarge Diagnosis: Resolved.\nHospital Course: Fluids.\n"
        )
        result = splitter.split(text, BundleMode.STRUCTURAL, NoteFormat.DISCHARGE)
        assert result.notes == [
            "Admission Diagnosis: CAP.\nDischarge Diagnosis: Pneumonia.\nHospital Course: Antibiotics.",
            "Admission Diagnosis: UTI.\nDischarge Diagnosis: Resolved.\nHospital Course: Fluids.",
        ]


class TestDeterminism:
    @pytest.mark.parametrize("mode", list(BundleMode))
    def test_repeated_split_is_identical(self, splitter, soap_bundle_text, mode):
        first = splitter.split(soap_bundle_text, mode, NoteFormat.SOAP)
        second = splitter.split(soap_bundle_text, mode, NoteFormat.SOAP)
        assert first.notes == second.notes
        assert first.warnings == second.warnings

    def test_mode_accepts_strings(self, splitter):
        result = splitter.split("A\n---\nB", "delimiter", "soap")
        assert result.notes == ["A", "B"]
