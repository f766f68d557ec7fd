"""
Review Layer - Optional human review between extraction and assembly.
"""

from clinote.review.reviewers import (
    CandidateReviewer,
    ConsoleReviewer,
    PassThroughReviewer,
    ReviewContext,
)

__all__ = [
    "CandidateReviewer",
    "ConsoleReviewer",
    "PassThroughReviewer",
    "ReviewContext",
]
