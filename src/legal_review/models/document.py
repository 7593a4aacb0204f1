"""Document-related data models for the Legal Review pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Page:
    """Raw text of a single page, as produced by upstream text extraction."""
    number: int
    text: str


@dataclass(frozen=True)
class TextSpan:
    """
    Candidate clause span produced by the segmenter.

    Offsets are character offsets into the owning page's text;
    ``end`` is exclusive.
    """
    page: int
    start: int
    end: int
    text: str

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.page, self.start)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Document:
    """
    Ingested legal document.

    Immutable once ingested; re-analysis produces a new run over the
    same document rather than mutating it.
    """
    id: str
    pages: Tuple[Page, ...] = field(default_factory=tuple)
    uploaded_at: datetime = field(default_factory=_utcnow)
    filename: Optional[str] = None

    @classmethod
    def from_pages(
        cls,
        document_id: str,
        pages: Iterable[Tuple[int, str]],
        filename: Optional[str] = None,
        uploaded_at: Optional[datetime] = None,
    ) -> "Document":
        """Build a document from ordered ``(page_number, text)`` pairs."""
        return cls(
            id=document_id,
            pages=tuple(Page(number=int(n), text=text or "") for n, text in pages),
            uploaded_at=uploaded_at or _utcnow(),
            filename=filename,
        )

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_text(self, number: int) -> str:
        for page in self.pages:
            if page.number == number:
                return page.text
        raise KeyError(number)

    def page_pairs(self) -> List[Tuple[int, str]]:
        return [(p.number, p.text) for p in self.pages]

    @property
    def content_length(self) -> int:
        """Number of non-whitespace characters across all pages."""
        return sum(len("".join(p.text.split())) for p in self.pages)


@dataclass(frozen=True)
class AppliedChange:
    """A single clause replacement applied during composition."""
    clause_id: str
    suggestion_id: str
    page: int
    clause_label: str
    original_text: str
    new_text: str
    edited: bool = False


@dataclass(frozen=True)
class ComposedDocument:
    """
    Revised document produced by merging accepted/edited suggestions.

    ``text`` joins the pages with a form feed so that page boundaries
    survive a plain-text round trip.
    """
    document_id: str
    run_id: str
    pages: Tuple[Page, ...]
    changes: Tuple[AppliedChange, ...]

    @property
    def text(self) -> str:
        return "\f".join(page.text for page in self.pages)

    def page_numbers(self) -> Sequence[int]:
        return [p.number for p in self.pages]
