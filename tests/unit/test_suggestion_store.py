"""Unit tests for the suggestion review store."""

import threading
from unittest.mock import MagicMock

import pytest

from legal_review.exceptions import ConcurrencyConflict, NotFoundError, ValidationError
from legal_review.models.clause import Suggestion
from legal_review.models.enums import ClauseType, RiskLevel, SuggestionStatus
from legal_review.review import SuggestionStore


def make_suggestion(n: int, clause_type=ClauseType.LIABILITY, risk_level=RiskLevel.HIGH) -> Suggestion:
    return Suggestion(
        id=f"sg-{n}",
        clause_id=f"cl-{n}",
        original_text=f"Original clause {n}.",
        suggested_text=f"Suggested clause {n}.",
        reasoning="Reduces exposure.",
        benefits=["Lower risk"],
        clause_type=clause_type,
        risk_level=risk_level,
        page=1,
    )


@pytest.fixture
def store():
    return SuggestionStore([make_suggestion(1), make_suggestion(2), make_suggestion(3)], run_id="run-1")


class TestTransitions:
    """Tests for single-suggestion state transitions."""

    def test_accept(self, store):
        result = store.accept("sg-1")
        assert result.status is SuggestionStatus.ACCEPTED
        assert result.version == 1
        assert store.version == 1

    def test_reject(self, store):
        assert store.reject("sg-2").status is SuggestionStatus.REJECTED

    def test_edit(self, store):
        result = store.edit("sg-1", "  Liability is capped at fees paid.  ")
        assert result.status is SuggestionStatus.EDITED
        assert result.edited_text == "Liability is capped at fees paid."
        assert result.effective_text == "Liability is capped at fees paid."

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_edit_with_empty_text_is_rejected(self, store, text):
        with pytest.raises(ValidationError):
            store.edit("sg-1", text)
        assert store.get("sg-1").status is SuggestionStatus.PENDING
        assert store.version == 0

    def test_edit_identical_to_suggestion_is_rejected(self, store):
        with pytest.raises(ValidationError):
            store.edit("sg-1", "Suggested clause 1.")

    def test_accept_then_reject_is_rejected(self, store):
        store.accept("sg-1")
        with pytest.raises(ValidationError):
            store.reject("sg-1")
        assert store.get("sg-1").status is SuggestionStatus.ACCEPTED

    def test_accept_twice_is_rejected(self, store):
        store.accept("sg-1")
        with pytest.raises(ValidationError):
            store.accept("sg-1")

    def test_reset_returns_to_pending_and_drops_edit(self, store):
        store.edit("sg-1", "My own wording.")
        result = store.reset("sg-1")
        assert result.status is SuggestionStatus.PENDING
        assert result.edited_text is None
        assert store.accept("sg-1").status is SuggestionStatus.ACCEPTED

    def test_reset_pending_is_rejected(self, store):
        with pytest.raises(ValidationError):
            store.reset("sg-1")

    def test_unknown_id(self, store):
        with pytest.raises(NotFoundError):
            store.accept("sg-404")
        with pytest.raises(NotFoundError):
            store.get("sg-404")

    def test_stale_version_conflicts(self, store):
        read = store.get("sg-1")
        store.accept("sg-1", expected_version=read.version)
        with pytest.raises(ConcurrencyConflict) as exc_info:
            store.reset("sg-1", expected_version=read.version)
        assert exc_info.value.expected_version == 0
        assert exc_info.value.actual_version == 1
        assert exc_info.value.retryable

    def test_returned_copies_are_detached(self, store):
        copy = store.get("sg-1")
        copy.status = SuggestionStatus.ACCEPTED
        copy.benefits.append("Injected")
        fresh = store.get("sg-1")
        assert fresh.status is SuggestionStatus.PENDING
        assert fresh.benefits == ["Lower risk"]


class TestAdd:
    def test_duplicate_id_rejected(self, store):
        with pytest.raises(ValidationError):
            store.add(make_suggestion(1))

    def test_non_pending_rejected(self):
        suggestion = make_suggestion(9)
        suggestion.status = SuggestionStatus.ACCEPTED
        with pytest.raises(ValidationError):
            SuggestionStore([suggestion])


class TestAcceptAllPending:
    """Tests for the bulk accept operation."""

    def test_only_pending_suggestions_are_accepted(self, store):
        store.reject("sg-2")
        result = store.accept_all_pending()

        assert result.accepted == ["sg-1", "sg-3"]
        assert result.skipped == {"sg-2": "status is rejected"}
        assert store.get("sg-1").status is SuggestionStatus.ACCEPTED
        assert store.get("sg-2").status is SuggestionStatus.REJECTED
        assert store.get("sg-3").status is SuggestionStatus.ACCEPTED

    def test_bulk_is_one_version_step(self, store):
        before = store.version
        result = store.accept_all_pending()
        assert result.version == before + 1

    def test_nothing_pending(self, store):
        store.accept_all_pending()
        result = store.accept_all_pending()
        assert result.accepted == []
        assert len(result.skipped) == 3

    def test_history_records_bulk(self, store):
        store.accept_all_pending(user_id="alice")
        record = store.history()[-1]
        assert record["action"] == "accept_all"
        assert record["suggestion_ids"] == ["sg-1", "sg-2", "sg-3"]
        assert record["user_id"] == "alice"


class TestQueries:
    def test_list_filters(self):
        store = SuggestionStore([
            make_suggestion(1, ClauseType.LIABILITY, RiskLevel.HIGH),
            make_suggestion(2, ClauseType.TERMINATION, RiskLevel.MEDIUM),
        ])
        store.accept("sg-2")

        assert [s.id for s in store.list(status=SuggestionStatus.PENDING)] == ["sg-1"]
        assert [s.id for s in store.list(clause_type=ClauseType.TERMINATION)] == ["sg-2"]
        assert [s.id for s in store.list(risk_level=RiskLevel.HIGH)] == ["sg-1"]

    def test_snapshot_is_consistent(self, store):
        store.accept("sg-1")
        snapshot = store.snapshot()
        store.reject("sg-2")

        assert snapshot.version == 1
        assert snapshot.get("sg-2").status is SuggestionStatus.PENDING
        assert [s.id for s in snapshot.applied()] == ["sg-1"]

    def test_by_clause(self, store):
        assert store.by_clause("cl-2").id == "sg-2"
        assert store.by_clause("cl-404") is None

    def test_statistics(self, store):
        store.accept("sg-1")
        store.edit("sg-2", "Different wording.")
        stats = store.statistics()

        assert stats["total"] == 3
        assert stats["accepted"] == 1
        assert stats["edited"] == 1
        assert stats["pending"] == 1
        assert stats["completed"] == 2
        assert stats["completion_rate"] == pytest.approx(2 / 3)

    def test_empty_statistics(self):
        stats = SuggestionStore().statistics()
        assert stats["total"] == 0
        assert stats["completion_rate"] == 0


class TestAudit:
    def test_transitions_are_audited(self):
        audit_logger = MagicMock()
        store = SuggestionStore([make_suggestion(1)], run_id="run-1", document_id="doc-1",
                                audit_logger=audit_logger)
        store.accept("sg-1", user_id="bob")

        audit_logger.log_review_action.assert_called_once()
        kwargs = audit_logger.log_review_action.call_args.kwargs
        assert kwargs["suggestion_id"] == "sg-1"
        assert kwargs["action"] == "accept"
        assert kwargs["status"] == "accepted"
        assert kwargs["user_id"] == "bob"

    def test_rejected_transition_is_not_audited(self):
        audit_logger = MagicMock()
        store = SuggestionStore([make_suggestion(1)], audit_logger=audit_logger)
        with pytest.raises(ValidationError):
            store.reset("sg-1")
        audit_logger.log_review_action.assert_not_called()


class TestConcurrency:
    """Tests for racing reviewers."""

    def test_exactly_one_of_racing_transitions_wins(self):
        store = SuggestionStore([make_suggestion(1)])
        barrier = threading.Barrier(8)
        outcomes = []
        lock = threading.Lock()

        def review(accept: bool):
            barrier.wait()
            try:
                if accept:
                    store.accept("sg-1", expected_version=0)
                else:
                    store.reject("sg-1", expected_version=0)
                result = "ok"
            except (ConcurrencyConflict, ValidationError):
                result = "lost"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=review, args=(i % 2 == 0,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("ok") == 1
        assert store.get("sg-1").version == 1
        assert store.version == 1

    def test_bulk_and_single_transitions_do_not_interleave(self):
        suggestions = [make_suggestion(n) for n in range(50)]
        store = SuggestionStore(suggestions)
        errors = []

        def bulk():
            store.accept_all_pending()

        def single():
            for n in range(50):
                try:
                    store.reject(f"sg-{n}")
                except ValidationError:
                    pass
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=bulk), threading.Thread(target=single)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        statuses = {s.status for s in store.list()}
        assert statuses <= {SuggestionStatus.ACCEPTED, SuggestionStatus.REJECTED}
        stats = store.statistics()
        assert stats["accepted"] + stats["rejected"] == 50
