"""Unit tests for revised document composition."""

from dataclasses import replace

import pytest

from legal_review.exceptions import ValidationError
from legal_review.models.clause import Clause, Suggestion
from legal_review.models.document import Document
from legal_review.models.enums import ClauseType, RiskLevel
from legal_review.review import DocumentComposer, SuggestionStore


PAGE_ONE = "Payment is due in 30 days.\n\nClient agrees to unlimited liability."
PAGE_TWO = "Either party may terminate at any time."


def clause_for(document: Document, page: int, text: str, n: int) -> Clause:
    start = document.page_text(page).index(text)
    return Clause(
        id=f"cl-{n}",
        document_id=document.id,
        run_id="run-1",
        page=page,
        start=start,
        end=start + len(text),
        text=text,
        clause_type=ClauseType.OTHER,
        confidence=50,
        risk_level=RiskLevel.HIGH,
        risk_score=80,
    )


@pytest.fixture
def document():
    return Document.from_pages("doc-1", [(1, PAGE_ONE), (2, PAGE_TWO)])


@pytest.fixture
def clauses(document):
    return [
        clause_for(document, 1, "Payment is due in 30 days.", 1),
        clause_for(document, 1, "Client agrees to unlimited liability.", 2),
        clause_for(document, 2, "Either party may terminate at any time.", 3),
    ]


@pytest.fixture
def store(clauses):
    return SuggestionStore([
        Suggestion(
            id=f"sg-{c.id[3:]}",
            clause_id=c.id,
            original_text=c.text,
            suggested_text=f"Revised {c.id}.",
            reasoning="r",
            page=c.page,
        )
        for c in clauses
    ])


class TestDocumentComposer:
    """Tests for merging reviewed suggestions into document text."""

    def test_nothing_applied_returns_original(self, document, clauses, store):
        composed = DocumentComposer().compose(document, clauses, store.snapshot())

        assert [p.text for p in composed.pages] == [PAGE_ONE, PAGE_TWO]
        assert composed.changes == ()
        assert composed.run_id == "run-1"

    def test_accepted_and_edited_are_applied(self, document, clauses, store):
        store.accept("sg-2")
        store.edit("sg-3", "Termination requires 60 days notice.")
        store.reject("sg-1")

        composed = DocumentComposer().compose(document, clauses, store.snapshot())

        assert composed.pages[0].text == "Payment is due in 30 days.\n\nRevised cl-2."
        assert composed.pages[1].text == "Termination requires 60 days notice."
        assert [c.clause_id for c in composed.changes] == ["cl-2", "cl-3"]
        assert composed.changes[1].edited
        assert not composed.changes[0].edited

    def test_pending_and_rejected_are_never_read(self, document, clauses, store):
        store.reject("sg-1")
        composed = DocumentComposer().compose(document, clauses, store.snapshot())
        assert "Revised" not in composed.text

    def test_idempotent(self, document, clauses, store):
        store.accept_all_pending()
        snapshot = store.snapshot()
        composer = DocumentComposer()
        assert composer.compose(document, clauses, snapshot) == composer.compose(document, clauses, snapshot)

    def test_multiple_changes_on_one_page_keep_offsets(self, document, clauses, store):
        store.accept("sg-1")
        store.accept("sg-2")
        composed = DocumentComposer().compose(document, clauses, store.snapshot())
        assert composed.pages[0].text == "Revised cl-1.\n\nRevised cl-2."

    def test_accepts_plain_suggestion_list(self, document, clauses, store):
        store.accept("sg-3")
        composed = DocumentComposer().compose(document, clauses, store.list(), run_id="run-x")
        assert composed.run_id == "run-x"
        assert composed.pages[1].text == "Revised cl-3."

    def test_mismatched_span_rejected(self, document, clauses, store):
        broken = replace(clauses[0], text="Something else entirely")
        store.accept("sg-1")
        with pytest.raises(ValidationError):
            DocumentComposer().compose(document, [broken] + clauses[1:], store.snapshot())
