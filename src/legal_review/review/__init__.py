"""Suggestion review and document composition.

The review service lives in ``legal_review.review.review_manager``; it is
not imported here because it depends on the pipeline, which itself
depends on the suggestion store.
"""

from .composer import DocumentComposer
from .suggestion_store import BulkResult, SuggestionSnapshot, SuggestionStore

__all__ = [
    "BulkResult",
    "DocumentComposer",
    "SuggestionSnapshot",
    "SuggestionStore",
]
