"""FastAPI application for the Legal Review system.

Exposes document submission, the clause/translation/suggestion query
surface, review actions and exports over HTTP.

Usage (from project root, after installing fastapi and uvicorn):

    uvicorn legal_review.api.app:app --reload

Configuration is read from ``LEGAL_REVIEW_*`` environment variables
(see ``PipelineConfig.from_env``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from ..exceptions import ConcurrencyConflict, NotFoundError, ReviewError, ValidationError
from ..models.clause import Clause, Suggestion, Translation
from ..models.metrics import DocumentMetrics, SummarySection
from ..pipeline import AnalysisRun, PipelineConfig
from ..review.review_manager import EXPORT_KINDS, ReviewManager
from ..review.suggestion_store import BulkResult


DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class PageIn(BaseModel):
    page: int
    text: str = ""


class DocumentIn(BaseModel):
    document_id: str
    filename: Optional[str] = None
    user_id: Optional[str] = None
    pages: List[PageIn] = Field(default_factory=list)


class TransitionIn(BaseModel):
    expected_version: Optional[int] = None
    user_id: Optional[str] = None


class EditIn(TransitionIn):
    text: str


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _clause_dict(clause: Clause) -> Dict[str, Any]:
    return {
        "id": clause.id,
        "page": clause.page,
        "start": clause.start,
        "end": clause.end,
        "text": clause.text,
        "type": clause.clause_type.value,
        "type_label": clause.type_label,
        "confidence": clause.confidence,
        "risk_level": clause.risk_level.value,
        "risk_score": clause.risk_score,
        "explanation": clause.explanation,
        "recommendations": list(clause.recommendations),
        "impact": clause.impact,
        "unscored": clause.unscored,
        "outcome": clause.outcome.value,
    }


def _translation_dict(translation: Translation, clause: Optional[Clause]) -> Dict[str, Any]:
    return {
        "clause_id": translation.clause_id,
        "type_label": clause.type_label if clause else None,
        "page": clause.page if clause else None,
        "original_text": translation.original_text,
        "simplified_text": translation.simplified_text,
        "readability_score": translation.readability_score,
        "complexity": translation.complexity.value,
    }


def _suggestion_dict(suggestion: Suggestion) -> Dict[str, Any]:
    return {
        "id": suggestion.id,
        "clause_id": suggestion.clause_id,
        "type": suggestion.clause_type.value,
        "risk_level": suggestion.risk_level.value,
        "page": suggestion.page,
        "original_text": suggestion.original_text,
        "suggested_text": suggestion.suggested_text,
        "edited_text": suggestion.edited_text,
        "status": suggestion.status.value,
        "reasoning": suggestion.reasoning,
        "benefits": list(suggestion.benefits),
        "version": suggestion.version,
    }


def _metrics_dict(metrics: DocumentMetrics) -> Dict[str, Any]:
    return {
        "document_id": metrics.document_id,
        "run_id": metrics.run_id,
        "total_clauses": metrics.total_clauses,
        "risk_counts": {level.value: count for level, count in metrics.risk_counts.items()},
        "overall_confidence": metrics.overall_confidence,
        "overall_risk_score": metrics.overall_risk_score,
        "average_readability": metrics.average_readability,
        "metrics": [
            {
                "category": m.category,
                "score": m.score,
                "description": m.description,
                "factors": list(m.factors),
            }
            for m in metrics.metrics
        ],
        "review_progress": dict(metrics.review_progress),
    }


def _section_dict(section: SummarySection) -> Dict[str, Any]:
    return {
        "title": section.title,
        "content": section.content,
        "key_points": list(section.key_points),
        "risk_level": section.risk_level.value,
        "page": section.page,
    }


def _run_dict(run: AnalysisRun, metrics: DocumentMetrics) -> Dict[str, Any]:
    """Run summary; ``metrics`` must reflect the current review state."""
    return {
        "run_id": run.id,
        "document_id": run.document_id,
        "filename": run.document.filename,
        "status": run.status.value,
        "clause_count": len(run.clauses),
        "suggestion_count": len(run.suggestion_store),
        "overall_confidence": metrics.overall_confidence,
        "review_progress": dict(metrics.review_progress),
        "started_at": run.started_at.isoformat(),
        "finished_at": run.finished_at.isoformat() if run.finished_at else None,
        "processing_time": run.processing_time,
        "cancelled": run.cancelled,
        "errors": list(run.errors),
        "warnings": list(run.warnings),
        "outcomes": [
            {
                "clause_id": o.clause_id,
                "index": o.index,
                "status": o.status.value,
                "errors": list(o.errors),
            }
            for o in run.outcomes
            if not o.ok
        ],
    }


def _bulk_dict(result: BulkResult) -> Dict[str, Any]:
    return {
        "accepted": list(result.accepted),
        "skipped": dict(result.skipped),
        "version": result.version,
    }


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def create_app(manager: Optional[ReviewManager] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        manager: Optional review manager. If not provided, one is created
            from the environment configuration.
    """
    app = FastAPI(title="Legal Review API", version="0.1.0")
    review_manager = manager or ReviewManager(config=PipelineConfig.from_env())
    app.state.review_manager = review_manager

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(ConcurrencyConflict)
    async def _conflict(request: Request, exc: ConcurrencyConflict) -> JSONResponse:
        return JSONResponse(status_code=409, content=exc.to_dict())

    @app.exception_handler(ReviewError)
    async def _review_error(request: Request, exc: ReviewError) -> JSONResponse:
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "runs": len(review_manager.list_runs())}

    # ----- Documents and runs ------------------------------------------------

    @app.post("/api/documents")
    def submit_document(payload: DocumentIn) -> Dict[str, Any]:
        """Ingest a document and run a full analysis over it."""
        run = review_manager.submit(
            payload.document_id,
            [(p.page, p.text) for p in payload.pages],
            filename=payload.filename,
            user_id=payload.user_id,
        )
        return _run_dict(run, review_manager.get_metrics(run.id))

    @app.get("/api/documents/{document_id}/runs")
    def list_document_runs(document_id: str) -> List[Dict[str, Any]]:
        return [
            _run_dict(run, review_manager.get_metrics(run.id))
            for run in review_manager.list_runs(document_id)
        ]

    @app.post("/api/runs/{run_id}/reanalyze")
    def reanalyze(run_id: str) -> Dict[str, Any]:
        run = review_manager.reanalyze(run_id)
        return _run_dict(run, review_manager.get_metrics(run.id))

    @app.get("/api/runs/{run_id}")
    def get_run(run_id: str) -> Dict[str, Any]:
        run = review_manager.get_run(run_id)
        return _run_dict(run, review_manager.get_metrics(run_id))

    @app.delete("/api/runs/{run_id}")
    def discard_run(run_id: str) -> Dict[str, Any]:
        review_manager.discard_run(run_id)
        return {"run_id": run_id, "discarded": True}

    # ----- Queries -----------------------------------------------------------

    @app.get("/api/runs/{run_id}/clauses")
    def list_clauses(
        run_id: str,
        clause_type: Optional[str] = Query(None, alias="type"),
        risk: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        clauses = review_manager.list_clauses(
            run_id, type_filter=clause_type, risk_level=risk, search=search
        )
        return [_clause_dict(c) for c in clauses]

    @app.get("/api/runs/{run_id}/translations")
    def list_translations(run_id: str, complexity: Optional[str] = None) -> List[Dict[str, Any]]:
        run = review_manager.get_run(run_id)
        return [
            _translation_dict(t, run.clause(t.clause_id))
            for t in review_manager.get_translations(run_id, complexity=complexity)
        ]

    @app.get("/api/runs/{run_id}/suggestions")
    def list_suggestions(
        run_id: str,
        status: Optional[str] = None,
        clause_type: Optional[str] = Query(None, alias="type"),
        risk: Optional[str] = None,
    ) -> Dict[str, Any]:
        suggestions = review_manager.list_suggestions(
            run_id, status=status, clause_type=clause_type, risk_level=risk
        )
        return {
            "suggestions": [_suggestion_dict(s) for s in suggestions],
            "statistics": review_manager.review_statistics(run_id),
        }

    @app.get("/api/runs/{run_id}/metrics")
    def get_metrics(run_id: str) -> Dict[str, Any]:
        return _metrics_dict(review_manager.get_metrics(run_id))

    @app.get("/api/runs/{run_id}/summary")
    def get_summary(run_id: str) -> Dict[str, Any]:
        sections = review_manager.get_summary(run_id)
        return {
            "sections": [_section_dict(s) for s in sections],
            "overall_confidence": review_manager.get_metrics(run_id).overall_confidence,
        }

    # ----- Review actions ----------------------------------------------------

    @app.post("/api/runs/{run_id}/suggestions/accept-all")
    def accept_all(run_id: str, payload: Optional[TransitionIn] = None) -> Dict[str, Any]:
        user_id = payload.user_id if payload else None
        return _bulk_dict(review_manager.accept_all_pending(run_id, user_id=user_id))

    @app.post("/api/runs/{run_id}/suggestions/{suggestion_id}/accept")
    def accept(run_id: str, suggestion_id: str, payload: Optional[TransitionIn] = None) -> Dict[str, Any]:
        payload = payload or TransitionIn()
        suggestion = review_manager.accept(
            run_id, suggestion_id,
            expected_version=payload.expected_version, user_id=payload.user_id,
        )
        return _suggestion_dict(suggestion)

    @app.post("/api/runs/{run_id}/suggestions/{suggestion_id}/reject")
    def reject(run_id: str, suggestion_id: str, payload: Optional[TransitionIn] = None) -> Dict[str, Any]:
        payload = payload or TransitionIn()
        suggestion = review_manager.reject(
            run_id, suggestion_id,
            expected_version=payload.expected_version, user_id=payload.user_id,
        )
        return _suggestion_dict(suggestion)

    @app.post("/api/runs/{run_id}/suggestions/{suggestion_id}/reset")
    def reset(run_id: str, suggestion_id: str, payload: Optional[TransitionIn] = None) -> Dict[str, Any]:
        payload = payload or TransitionIn()
        suggestion = review_manager.reset(
            run_id, suggestion_id,
            expected_version=payload.expected_version, user_id=payload.user_id,
        )
        return _suggestion_dict(suggestion)

    @app.post("/api/runs/{run_id}/suggestions/{suggestion_id}/edit")
    def edit(run_id: str, suggestion_id: str, payload: EditIn) -> Dict[str, Any]:
        suggestion = review_manager.edit(
            run_id, suggestion_id, payload.text,
            expected_version=payload.expected_version, user_id=payload.user_id,
        )
        return _suggestion_dict(suggestion)

    # ----- Exports -----------------------------------------------------------

    @app.get("/api/runs/{run_id}/exports/revised.docx")
    def export_revised_docx(run_id: str, tracked: bool = True) -> Response:
        content = review_manager.export_docx(run_id, tracked=tracked)
        flavour = "tracked" if tracked else "clean"
        return Response(
            content=content,
            media_type=DOCX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="revised-contract-{flavour}.docx"'},
        )

    @app.get("/api/runs/{run_id}/exports/{kind}", response_class=PlainTextResponse)
    def export_text(run_id: str, kind: str, clause_id: Optional[str] = None) -> PlainTextResponse:
        if kind not in EXPORT_KINDS:
            raise HTTPException(
                status_code=400,
                detail=f"kind must be one of: {', '.join(EXPORT_KINDS)}",
            )
        content = review_manager.export_text(run_id, kind, clause_id=clause_id)
        return PlainTextResponse(content)

    # ----- Audit -------------------------------------------------------------

    @app.get("/api/documents/{document_id}/audit")
    def export_audit_log(document_id: str, format: str = "json") -> Response:
        audit_logger = review_manager.audit_logger
        if audit_logger is None:
            raise HTTPException(status_code=404, detail="Audit logging is not enabled")
        try:
            content = audit_logger.export_log(document_id, format=format)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        media_type = "application/json" if format == "json" else "text/csv"
        return Response(content=content, media_type=media_type)

    return app


app = create_app()
