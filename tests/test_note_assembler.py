"""
Tests for note assembly: last-write-wins, unclassified handling, warning order.
"""

import pytest

from clinote.assembly import NoteAssembler
from clinote.core.enums import CandidateOrigin, NoteFormat, WarningStage
from clinote.core.models import ExtractionCandidate, NoteWarning


def rule(label, content):
    return ExtractionCandidate(label, content, CandidateOrigin.FORMAT_RULE)


@pytest.fixture
def assembler():
    return NoteAssembler()


class TestAssemble:
    def test_maps_candidates_in_order(self, assembler):
        note = assembler.assemble(
            [rule("Chief Complaint", "cough."), rule("Plan", "rest.")], NoteFormat.HP, "visit.txt", 1
        )
        assert note.sections == {"Chief Complaint": "cough.", "Plan": "rest."}
        assert note.section_labels == ["Chief Complaint", "Plan"]
        assert note.source_id == "visit.txt"
        assert note.ordinal == 1
        assert note.note_format == NoteFormat.HP
        assert note.warnings == []

    def test_later_candidate_overwrites_with_warning(self, assembler):
        note = assembler.assemble([rule("Plan", "first."), rule("Plan", "second.")], NoteFormat.HP, "x", 1)
        assert note.sections == {"Plan": "second."}
        assert note.warnings == [
            NoteWarning(WarningStage.ASSEMBLY, "section 'Plan' overwritten by a later candidate")
        ]

    def test_unclassified_candidates_are_kept_in_order(self, assembler):
        candidates = [
            ExtractionCandidate.unclassified("first loose text"),
            rule("Plan", "rest."),
            ExtractionCandidate.unclassified("second loose text"),
        ]
        note = assembler.assemble(candidates, NoteFormat.HP, "x", 2)
        assert note.unclassified == ["first loose text", "second loose text"]
        assert "Unclassified" not in note.sections
        assert note.warnings == []

    def test_upstream_warnings_come_first(self, assembler):
        upstream = [
            NoteWarning(WarningStage.BUNDLE_SPLIT, "expected bundle delimiter not found, treating as single note"),
            NoteWarning(WarningStage.EXTRACTION, "missing mandatory section 'Chief Complaint'"),
        ]
        note = assembler.assemble([rule("Plan", "a"), rule("Plan", "b")], NoteFormat.HP, "x", 1, upstream)
        assert [w.stage for w in note.warnings] == [
            WarningStage.BUNDLE_SPLIT,
            WarningStage.EXTRACTION,
            WarningStage.ASSEMBLY,
        ]

    def test_caller_warning_list_is_not_mutated(self, assembler):
        upstream = [NoteWarning(WarningStage.EXTRACTION, "w")]
        assembler.assemble([rule("Plan", "a"), rule("Plan", "b")], NoteFormat.HP, "x", 1, upstream)
        assert len(upstream) == 1

    def test_empty_candidate_list(self, assembler):
        note = assembler.assemble([], NoteFormat.SOAP, "x", 1)
        assert note.sections == {}
        assert note.unclassified == []

    @pytest.mark.parametrize("ordinal", [0, -1])
    def test_rejects_non_positive_ordinal(self, assembler, ordinal):
        with pytest.raises(ValueError):
            assembler.assemble([], NoteFormat.SOAP, "x", ordinal)

    def test_to_dict_shape(self, assembler):
        note = assembler.assemble([rule("Plan", "rest.")], NoteFormat.HP, "visit.txt", 1)
        data = note.to_dict()
        assert data == {
            "source_id": "visit.txt",
            "ordinal": 1,
            "format": "hp",
            "sections": {"Plan": "rest."},
            "unclassified": [],
            "warnings": [],
        }
