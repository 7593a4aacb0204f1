"""Suggestion review state.

The SuggestionStore is the only component that changes a suggestion's
status. Transitions on one suggestion are serialized by a per-id lock;
bulk operations and snapshots take every per-id lock in sorted id order so
they never deadlock with each other or with single transitions.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..exceptions import ConcurrencyConflict, NotFoundError, ValidationError
from ..models.clause import Suggestion
from ..models.enums import ClauseType, RiskLevel, SuggestionStatus


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkResult:
    """Outcome of a bulk transition."""
    accepted: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)  # suggestion id -> reason
    version: int = 0


@dataclass(frozen=True)
class SuggestionSnapshot:
    """Immutable, internally consistent view of a store at one version."""
    suggestions: Tuple[Suggestion, ...]
    version: int

    def get(self, suggestion_id: str) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def applied(self) -> List[Suggestion]:
        """Suggestions whose text flows into composition."""
        return [s for s in self.suggestions if s.status.is_applied]

    def by_clause(self) -> Dict[str, Suggestion]:
        return {s.clause_id: s for s in self.suggestions}


class SuggestionStore:
    """
    Holds the suggestions of one analysis run and their review state.

    States: ``pending -> {accepted, rejected, edited}``; ``reset`` returns
    any terminal state to ``pending``. Every transition accepts an
    optional ``expected_version`` (the suggestion's version as last read
    by the caller); a mismatch raises ConcurrencyConflict.

    Callers only ever receive copies of the stored suggestions.
    """

    def __init__(
        self,
        suggestions: Iterable[Suggestion] = (),
        run_id: Optional[str] = None,
        document_id: Optional[str] = None,
        audit_logger=None,
    ):
        """
        Initialize the store.

        Args:
            suggestions: Initial suggestions, in canonical clause order.
            run_id: Owning analysis run, recorded in history and audit.
            document_id: Owning document, recorded in audit.
            audit_logger: Optional AuditLogger for REVIEW_ACTION events.
        """
        self.run_id = run_id
        self.document_id = document_id
        self.audit_logger = audit_logger
        self._items: Dict[str, Suggestion] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._store_lock = threading.Lock()
        self._version = 0
        self._history: List[Dict[str, Any]] = []
        for suggestion in suggestions:
            self.add(suggestion)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, suggestion_id: str) -> bool:
        return suggestion_id in self._items

    @property
    def version(self) -> int:
        """Store version; incremented by every successful transition."""
        with self._store_lock:
            return self._version

    def add(self, suggestion: Suggestion) -> Suggestion:
        """
        Register a new pending suggestion.

        Raises:
            ValidationError: If the id is already present or the
                suggestion is not pending.
        """
        if suggestion.status is not SuggestionStatus.PENDING:
            raise ValidationError(
                "New suggestions must be pending",
                location=suggestion.id,
                details={"status": suggestion.status.value},
            )
        with self._store_lock:
            if suggestion.id in self._items:
                raise ValidationError("Duplicate suggestion id", location=suggestion.id)
            self._items[suggestion.id] = replace(suggestion, benefits=list(suggestion.benefits))
            self._locks[suggestion.id] = threading.Lock()
        return replace(suggestion)

    # =========================================================================
    # Transitions
    # =========================================================================

    def accept(
        self,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        """Accept a pending suggestion."""
        def apply(item: Suggestion) -> None:
            self._require_pending(item, "accept")
            item.status = SuggestionStatus.ACCEPTED

        return self._transition(suggestion_id, "accept", apply, expected_version, user_id)

    def reject(
        self,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        """Reject a pending suggestion."""
        def apply(item: Suggestion) -> None:
            self._require_pending(item, "reject")
            item.status = SuggestionStatus.REJECTED

        return self._transition(suggestion_id, "reject", apply, expected_version, user_id)

    def edit(
        self,
        suggestion_id: str,
        text: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        """
        Replace a pending suggestion's text with user-edited text.

        Raises:
            ValidationError: If the suggestion is not pending, or the text
                is empty or identical to the suggested text.
        """
        def apply(item: Suggestion) -> None:
            self._require_pending(item, "edit")
            if text is None or not text.strip():
                raise ValidationError(
                    "Edited text must not be empty",
                    location=item.id,
                )
            if text.strip() == item.suggested_text.strip():
                raise ValidationError(
                    "Edited text is identical to the suggested text",
                    location=item.id,
                )
            item.status = SuggestionStatus.EDITED
            item.edited_text = text.strip()

        return self._transition(suggestion_id, "edit", apply, expected_version, user_id)

    def reset(
        self,
        suggestion_id: str,
        expected_version: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Suggestion:
        """Return a reviewed suggestion to pending, discarding any edit."""
        def apply(item: Suggestion) -> None:
            if not item.status.is_terminal:
                raise ValidationError(
                    "Cannot reset a pending suggestion",
                    location=item.id,
                    details={"status": item.status.value},
                )
            item.status = SuggestionStatus.PENDING
            item.edited_text = None

        return self._transition(suggestion_id, "reset", apply, expected_version, user_id)

    def accept_all_pending(self, user_id: Optional[str] = None) -> BulkResult:
        """
        Atomically accept every suggestion that is pending.

        All per-id locks are held for the duration, so no single
        transition can interleave. Suggestions that are not pending at
        that moment are reported in ``skipped``.

        Returns:
            BulkResult with accepted ids (canonical order) and skip reasons.
        """
        ids = sorted(self._items.keys())
        locks = [self._locks[i] for i in ids]
        accepted: List[str] = []
        skipped: Dict[str, str] = {}
        copies: List[Suggestion] = []

        self._acquire_all(locks)
        try:
            for suggestion_id, item in self._items.items():
                if item.status is not SuggestionStatus.PENDING:
                    skipped[suggestion_id] = f"status is {item.status.value}"
                    continue
                item.status = SuggestionStatus.ACCEPTED
                item.version += 1
                accepted.append(suggestion_id)
                copies.append(replace(item))

            with self._store_lock:
                if accepted:
                    self._version += 1
                version = self._version
                if accepted:
                    self._record(
                        "accept_all", accepted, SuggestionStatus.PENDING,
                        SuggestionStatus.ACCEPTED, version, user_id,
                    )
        finally:
            self._release_all(locks)

        logger.info(
            f"Bulk accepted {len(accepted)} suggestions "
            f"({len(skipped)} skipped) in run {self.run_id}"
        )
        for item in copies:
            self._audit(item, "accept_all", user_id)
        return BulkResult(accepted=accepted, skipped=skipped, version=version)

    def _transition(
        self,
        suggestion_id: str,
        action: str,
        apply: Callable[[Suggestion], None],
        expected_version: Optional[int],
        user_id: Optional[str],
    ) -> Suggestion:
        lock = self._lock_for(suggestion_id)
        with lock:
            item = self._items[suggestion_id]
            if expected_version is not None and expected_version != item.version:
                raise ConcurrencyConflict(
                    "Suggestion was modified by another reviewer",
                    location=suggestion_id,
                    expected_version=expected_version,
                    actual_version=item.version,
                )
            previous = item.status
            try:
                apply(item)
            except ValidationError:
                logger.warning(
                    f"Rejected '{action}' on suggestion {suggestion_id} "
                    f"in state {previous.value}"
                )
                raise
            item.version += 1
            result = replace(item, benefits=list(item.benefits))

            with self._store_lock:
                self._version += 1
                self._record(
                    action, [suggestion_id], previous, item.status, self._version, user_id,
                )

        logger.info(
            f"Suggestion {suggestion_id}: {previous.value} -> {result.status.value} ({action})"
        )
        self._audit(result, action, user_id)
        return result

    @staticmethod
    def _require_pending(item: Suggestion, action: str) -> None:
        if item.status is not SuggestionStatus.PENDING:
            raise ValidationError(
                f"Cannot {action} a suggestion that is {item.status.value}",
                location=item.id,
                details={"status": item.status.value, "action": action},
            )

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, suggestion_id: str) -> Suggestion:
        """
        Get a copy of one suggestion.

        Raises:
            NotFoundError: If the id is unknown.
        """
        with self._lock_for(suggestion_id):
            item = self._items[suggestion_id]
            return replace(item, benefits=list(item.benefits))

    def list(
        self,
        status: Optional[SuggestionStatus] = None,
        clause_type: Optional[ClauseType] = None,
        risk_level: Optional[RiskLevel] = None,
    ) -> List[Suggestion]:
        """List suggestion copies in canonical order, optionally filtered."""
        result = []
        for suggestion in self.snapshot().suggestions:
            if status is not None and suggestion.status is not status:
                continue
            if clause_type is not None and suggestion.clause_type is not clause_type:
                continue
            if risk_level is not None and suggestion.risk_level is not risk_level:
                continue
            result.append(suggestion)
        return result

    def by_clause(self, clause_id: str) -> Optional[Suggestion]:
        """Get the suggestion for a clause, if any."""
        return self.snapshot().by_clause().get(clause_id)

    def snapshot(self) -> SuggestionSnapshot:
        """Take a consistent copy of every suggestion and the store version."""
        ids = sorted(self._items.keys())
        locks = [self._locks[i] for i in ids]
        self._acquire_all(locks)
        try:
            copies = tuple(
                replace(item, benefits=list(item.benefits)) for item in self._items.values()
            )
            with self._store_lock:
                version = self._version
        finally:
            self._release_all(locks)
        return SuggestionSnapshot(suggestions=copies, version=version)

    def statistics(self) -> Dict[str, Any]:
        """
        Get statistics about review progress.

        Returns:
            Dictionary with total, per-status counts, completed and
            completion_rate.
        """
        items = self.snapshot().suggestions
        total = len(items)
        counts = {status: 0 for status in SuggestionStatus}
        for item in items:
            counts[item.status] += 1
        completed = total - counts[SuggestionStatus.PENDING]

        return {
            'total': total,
            'pending': counts[SuggestionStatus.PENDING],
            'accepted': counts[SuggestionStatus.ACCEPTED],
            'rejected': counts[SuggestionStatus.REJECTED],
            'edited': counts[SuggestionStatus.EDITED],
            'completed': completed,
            'completion_rate': completed / total if total > 0 else 0,
        }

    def history(self) -> List[Dict[str, Any]]:
        """Get the history of all transitions, oldest first."""
        with self._store_lock:
            return [dict(record) for record in self._history]

    # =========================================================================
    # Internals
    # =========================================================================

    def _lock_for(self, suggestion_id: str) -> threading.Lock:
        with self._store_lock:
            lock = self._locks.get(suggestion_id)
        if lock is None:
            raise NotFoundError("Suggestion not found", location=suggestion_id)
        return lock

    @staticmethod
    def _acquire_all(locks: List[threading.Lock]) -> None:
        for lock in locks:
            lock.acquire()

    @staticmethod
    def _release_all(locks: List[threading.Lock]) -> None:
        for lock in reversed(locks):
            lock.release()

    def _record(
        self,
        action: str,
        suggestion_ids: List[str],
        from_status: SuggestionStatus,
        to_status: SuggestionStatus,
        version: int,
        user_id: Optional[str],
    ) -> None:
        # Caller holds the store lock.
        self._history.append({
            'run_id': self.run_id,
            'suggestion_ids': list(suggestion_ids),
            'action': action,
            'from_status': from_status.value,
            'to_status': to_status.value,
            'store_version': version,
            'user_id': user_id,
            'timestamp': datetime.now(timezone.utc).isoformat(),
        })

    def _audit(self, item: Suggestion, action: str, user_id: Optional[str]) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.log_review_action(
            document_id=self.document_id,
            run_id=self.run_id,
            suggestion_id=item.id,
            clause_id=item.clause_id,
            action=action,
            status=item.status.value,
            user_id=user_id,
            edited_text=item.edited_text,
        )
