"""
Assembly Layer - Builds StructuredNote records from candidates.
"""

from clinote.assembly.note_assembler import NoteAssembler

__all__ = ["NoteAssembler"]
