"""
Note Assembler - Builds the final StructuredNote

Merges a (possibly human-reviewed) candidate sequence with bundle metadata
and all upstream warnings. Performs structural merging only; format-specific
knowledge stays in the extraction layer.

Pipeline Position:
    Candidate Extractor → (review) → [Note Assembler] → Renderer
                                     ^^^^^^^^^^^^^^^^
                                     You are here
"""

from typing import Iterable, List, Optional

from loguru import logger

from clinote.core.constants import WARNING_MESSAGES
from clinote.core.enums import NoteFormat, WarningStage
from clinote.core.models import ExtractionCandidate, NoteWarning, StructuredNote


class NoteAssembler:
    """
    Map a candidate sequence onto a StructuredNote.

    Rules:
        - candidates are applied in sequence order
        - unclassified candidates are appended to `unclassified`
        - a later candidate for a label already present overwrites it
          (last write wins) and adds an assembly warning
        - upstream warnings come first, in the order given

    Example:
        >>> assembler = NoteAssembler()
        >>> note = assembler.assemble(candidates, NoteFormat.HP, "visit.txt", 1, warnings)
        >>> note.sections["Plan"]
        'rest and fluids.'
    """

    def assemble(
        self,
        candidates: Iterable[ExtractionCandidate],
        note_format: NoteFormat,
        source_id: str,
        ordinal: int,
        warnings: Optional[List[NoteWarning]] = None,
    ) -> StructuredNote:
        """
        Assemble one structured note.

        Raises:
            ValueError: If ordinal is not 1-based
        """
        if ordinal < 1:
            raise ValueError(f"Ordinal must be 1-based, got {ordinal}")

        note = StructuredNote(
            source_id=str(source_id),
            ordinal=ordinal,
            note_format=NoteFormat.from_string(note_format),
            warnings=list(warnings or []),
        )

        for candidate in candidates:
            if candidate.is_unclassified:
                note.unclassified.append(candidate.content)
                continue
            if candidate.label in note.sections:
                note.warnings.append(
                    NoteWarning(
                        WarningStage.ASSEMBLY,
                        WARNING_MESSAGES["section_overwritten"].format(label=candidate.label),
                    )
                )
            note.sections[candidate.label] = candidate.content

        logger.debug(
            f"Assembled note {source_id}#{ordinal} | sections={note.section_labels} "
            f"| unclassified={len(note.unclassified)} | warnings={note.warning_count}"
        )
        return note
