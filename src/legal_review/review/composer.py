"""Revised document composition."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..exceptions import ValidationError
from ..models.clause import Clause, Suggestion
from ..models.document import AppliedChange, ComposedDocument, Document, Page
from ..performance import timed_operation
from .suggestion_store import SuggestionSnapshot


logger = logging.getLogger(__name__)


class DocumentComposer:
    """
    Merges accepted and edited suggestions back into the document text.

    Each applied clause span is replaced by the suggestion's edited text,
    or its suggested text when unedited. All other text, including the
    whitespace between clauses, is copied verbatim. Pending and rejected
    suggestions are never read.
    """

    @timed_operation("compose_document")
    def compose(
        self,
        document: Document,
        clauses: Sequence[Clause],
        snapshot: Union[SuggestionSnapshot, Iterable[Suggestion]],
        run_id: Optional[str] = None,
    ) -> ComposedDocument:
        """
        Compose the revised document.

        Args:
            document: The original document.
            clauses: Clauses of the run.
            snapshot: Suggestion snapshot (or suggestions) to apply.
            run_id: Run identifier; taken from the clauses when omitted.

        Returns:
            ComposedDocument. Composing the same snapshot twice yields
            identical output.

        Raises:
            ValidationError: If a clause span no longer matches the
                document text.
        """
        suggestions = snapshot.suggestions if isinstance(snapshot, SuggestionSnapshot) else snapshot
        applied: Dict[str, Suggestion] = {
            s.clause_id: s for s in suggestions if s.status.is_applied
        }

        by_page: Dict[int, List[Clause]] = {}
        for clause in clauses:
            if clause.id in applied:
                by_page.setdefault(clause.page, []).append(clause)

        pages = []
        changes: List[AppliedChange] = []
        for page in document.pages:
            page_clauses = sorted(by_page.get(page.number, []), key=lambda c: c.start)
            text = page.text
            self._check_spans(page, page_clauses)

            # Apply from the end of the page so earlier offsets stay valid
            for clause in reversed(page_clauses):
                suggestion = applied[clause.id]
                text = text[:clause.start] + suggestion.effective_text + text[clause.end:]

            for clause in page_clauses:
                suggestion = applied[clause.id]
                changes.append(AppliedChange(
                    clause_id=clause.id,
                    suggestion_id=suggestion.id,
                    page=clause.page,
                    clause_label=clause.type_label,
                    original_text=clause.text,
                    new_text=suggestion.effective_text,
                    edited=suggestion.edited_text is not None,
                ))
            pages.append(Page(number=page.number, text=text))

        if run_id is None:
            run_id = clauses[0].run_id if clauses else ""

        logger.info(
            f"Composed document {document.id} (run {run_id}) with {len(changes)} changes"
        )
        return ComposedDocument(
            document_id=document.id,
            run_id=run_id,
            pages=tuple(pages),
            changes=tuple(changes),
        )

    @staticmethod
    def _check_spans(page: Page, clauses: List[Clause]) -> None:
        previous_end = 0
        for clause in clauses:
            if clause.start < previous_end or page.text[clause.start:clause.end] != clause.text:
                raise ValidationError(
                    "Clause span does not match document text",
                    location=f"page {page.number}, offset {clause.start}",
                    details={"clause_id": clause.id},
                )
            previous_end = clause.end
