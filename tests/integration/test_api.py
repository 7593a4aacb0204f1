"""Integration tests for the HTTP API."""

import io
import json

import pytest
from docx import Document as DocxDocument
from fastapi.testclient import TestClient

from legal_review.api.app import DOCX_MEDIA_TYPE, create_app
from legal_review.fixtures import SAMPLE_DOCUMENT_ID


@pytest.fixture
def client(manager):
    return TestClient(create_app(manager))


@pytest.fixture
def run_id(client, pages):
    response = client.post("/api/documents", json={
        "document_id": SAMPLE_DOCUMENT_ID,
        "filename": "service-agreement.pdf",
        "user_id": "alice",
        "pages": [{"page": number, "text": text} for number, text in pages],
    })
    assert response.status_code == 200
    return response.json()["run_id"]


def _suggestion_id(client, run_id, clause_type):
    body = client.get(f"/api/runs/{run_id}/suggestions", params={"type": clause_type}).json()
    return body["suggestions"][0]["id"]


class TestDocuments:
    """Tests for submission and run endpoints."""

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok", "runs": 0}

    def test_submit(self, client, pages):
        response = client.post("/api/documents", json={
            "document_id": "doc-1",
            "pages": [{"page": number, "text": text} for number, text in pages],
        })
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "complete"
        assert body["clause_count"] == 8
        assert body["suggestion_count"] == 4
        assert body["overall_confidence"] == 95
        assert body["outcomes"] == []

    def test_submit_without_pages(self, client):
        response = client.post("/api/documents", json={"document_id": "doc-1", "pages": []})
        assert response.status_code == 400
        assert response.json()["error_type"] == "ValidationError"

    def test_submit_out_of_order_pages(self, client):
        response = client.post("/api/documents", json={
            "document_id": "doc-1",
            "pages": [{"page": 2, "text": "b"}, {"page": 1, "text": "a"}],
        })
        assert response.status_code == 400

    def test_get_and_list_runs(self, client, run_id):
        assert client.get(f"/api/runs/{run_id}").json()["filename"] == "service-agreement.pdf"

        runs = client.get(f"/api/documents/{SAMPLE_DOCUMENT_ID}/runs").json()
        assert [r["run_id"] for r in runs] == [run_id]

    def test_run_reflects_current_review_state(self, client, run_id):
        assert client.get(f"/api/runs/{run_id}").json()["review_progress"]["pending"] == 4

        client.post(f"/api/runs/{run_id}/suggestions/accept-all")
        body = client.get(f"/api/runs/{run_id}").json()

        assert body["review_progress"]["accepted"] == 4
        assert body["review_progress"]["pending"] == 0
        runs = client.get(f"/api/documents/{SAMPLE_DOCUMENT_ID}/runs").json()
        assert runs[0]["review_progress"]["accepted"] == 4

    def test_reanalyze(self, client, run_id):
        response = client.post(f"/api/runs/{run_id}/reanalyze")
        assert response.status_code == 200
        assert response.json()["run_id"] != run_id

    def test_discard(self, client, run_id):
        assert client.delete(f"/api/runs/{run_id}").json() == {"run_id": run_id, "discarded": True}
        response = client.get(f"/api/runs/{run_id}")
        assert response.status_code == 404
        assert response.json()["error_type"] == "NotFoundError"


class TestQueries:
    """Tests for the query endpoints."""

    def test_clauses(self, client, run_id):
        clauses = client.get(f"/api/runs/{run_id}/clauses").json()
        assert len(clauses) == 8
        assert clauses[0]["type_label"] == "Indemnification"
        assert clauses[0]["outcome"] == "ok"

    def test_clause_filters(self, client, run_id):
        high = client.get(f"/api/runs/{run_id}/clauses", params={"risk": "high", "type": "liab"}).json()
        assert [c["type"] for c in high] == ["liability"]
        assert high[0]["risk_score"] == 95

        safe = client.get(f"/api/runs/{run_id}/clauses", params={"risk": "low"}).json()
        assert {c["risk_level"] for c in safe} == {"safe"}

        found = client.get(f"/api/runs/{run_id}/clauses", params={"search": "Delaware"}).json()
        assert [c["type"] for c in found] == ["governing_law"]

    def test_invalid_risk_filter(self, client, run_id):
        response = client.get(f"/api/runs/{run_id}/clauses", params={"risk": "extreme"})
        assert response.status_code == 400

    def test_translations(self, client, run_id):
        translations = client.get(f"/api/runs/{run_id}/translations", params={"complexity": "low"}).json()
        assert [t["type_label"] for t in translations] == ["Payment Terms", "Performance"]
        assert translations[0]["readability_score"] == 96

    def test_suggestions(self, client, run_id):
        body = client.get(f"/api/runs/{run_id}/suggestions", params={"risk": "high"}).json()
        assert {s["type"] for s in body["suggestions"]} == {"intellectual_property", "liability"}
        assert body["statistics"]["total"] == 4
        assert all(s["version"] == 0 for s in body["suggestions"])

    def test_metrics_and_summary(self, client, run_id):
        metrics = client.get(f"/api/runs/{run_id}/metrics").json()
        assert metrics["risk_counts"] == {"safe": 4, "medium": 2, "high": 2}
        assert metrics["overall_risk_score"] == 46
        assert [m["score"] for m in metrics["metrics"]] == [100, 90, 91, 100]

        summary = client.get(f"/api/runs/{run_id}/summary").json()
        assert summary["overall_confidence"] == 95
        assert summary["sections"][0]["title"] == "Indemnification"

    def test_unknown_run(self, client):
        assert client.get("/api/runs/missing/clauses").status_code == 404


class TestReviewActions:
    """Tests for the review action endpoints."""

    def test_accept(self, client, run_id):
        suggestion_id = _suggestion_id(client, run_id, "liability")
        response = client.post(
            f"/api/runs/{run_id}/suggestions/{suggestion_id}/accept",
            json={"expected_version": 0, "user_id": "alice"},
        )
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "accepted"
        assert body["version"] == 1

        metrics = client.get(f"/api/runs/{run_id}/metrics").json()
        assert metrics["review_progress"]["accepted"] == 1

    def test_accept_without_body(self, client, run_id):
        suggestion_id = _suggestion_id(client, run_id, "termination")
        response = client.post(f"/api/runs/{run_id}/suggestions/{suggestion_id}/accept")
        assert response.json()["status"] == "accepted"

    def test_stale_version_conflicts(self, client, run_id):
        suggestion_id = _suggestion_id(client, run_id, "liability")
        url = f"/api/runs/{run_id}/suggestions/{suggestion_id}/reject"
        assert client.post(url, json={"expected_version": 0}).status_code == 200

        response = client.post(
            f"/api/runs/{run_id}/suggestions/{suggestion_id}/reset",
            json={"expected_version": 0},
        )
        assert response.status_code == 409
        assert response.json()["retryable"] is True

    def test_invalid_transition(self, client, run_id):
        suggestion_id = _suggestion_id(client, run_id, "liability")
        client.post(f"/api/runs/{run_id}/suggestions/{suggestion_id}/reject")
        response = client.post(f"/api/runs/{run_id}/suggestions/{suggestion_id}/accept")
        assert response.status_code == 400

    def test_edit(self, client, run_id):
        suggestion_id = _suggestion_id(client, run_id, "intellectual_property")
        url = f"/api/runs/{run_id}/suggestions/{suggestion_id}/edit"

        assert client.post(url, json={"text": "   "}).status_code == 400
        assert client.post(url, json={}).status_code == 422

        body = client.post(url, json={"text": "IP is jointly owned."}).json()
        assert body["status"] == "edited"
        assert body["edited_text"] == "IP is jointly owned."

    def test_unknown_suggestion(self, client, run_id):
        response = client.post(f"/api/runs/{run_id}/suggestions/sg-missing/accept")
        assert response.status_code == 404

    def test_accept_all(self, client, run_id):
        response = client.post(f"/api/runs/{run_id}/suggestions/accept-all", json={"user_id": "bob"})
        body = response.json()
        assert len(body["accepted"]) == 4
        assert body["skipped"] == {}
        assert body["version"] == 1


class TestExports:
    """Tests for text, .docx and audit exports."""

    def test_text_exports(self, client, run_id):
        response = client.get(f"/api/runs/{run_id}/exports/clauses")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("CLAUSE ANALYSIS")

    def test_single_translation_export(self, client, run_id):
        clause_id = client.get(f"/api/runs/{run_id}/clauses").json()[1]["id"]
        response = client.get(
            f"/api/runs/{run_id}/exports/translations", params={"clause_id": clause_id}
        )
        assert response.status_code == 200
        assert response.text.count("Original Text:") == 1
        assert response.text.endswith("Readability Score: 96%")

        missing = client.get(
            f"/api/runs/{run_id}/exports/translations", params={"clause_id": "cl-missing"}
        )
        assert missing.status_code == 404

    def test_clause_id_rejected_for_summary(self, client, run_id):
        clause_id = client.get(f"/api/runs/{run_id}/clauses").json()[0]["id"]
        response = client.get(f"/api/runs/{run_id}/exports/summary", params={"clause_id": clause_id})
        assert response.status_code == 400

    def test_unknown_export_kind(self, client, run_id):
        assert client.get(f"/api/runs/{run_id}/exports/slides").status_code == 400

    def test_docx_export(self, client, run_id):
        client.post(f"/api/runs/{run_id}/suggestions/accept-all")
        response = client.get(f"/api/runs/{run_id}/exports/revised.docx", params={"tracked": "false"})

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MEDIA_TYPE
        assert "revised-contract-clean.docx" in response.headers["content-disposition"]
        doc = DocxDocument(io.BytesIO(response.content))
        assert doc.paragraphs[0].text == "Revised Document"

    def test_audit_export(self, client, run_id):
        client.post(f"/api/runs/{run_id}/suggestions/accept-all", json={"user_id": "bob"})
        response = client.get(f"/api/documents/{SAMPLE_DOCUMENT_ID}/audit")
        data = json.loads(response.text)

        assert response.status_code == 200
        assert len(data["review_decisions"]) == 4
        types = {event["event_type"] for event in data["events"]}
        assert {"document_ingested", "analysis_started", "analysis_completed"} <= types

    def test_audit_export_csv_and_bad_format(self, client, run_id):
        response = client.get(f"/api/documents/{SAMPLE_DOCUMENT_ID}/audit", params={"format": "csv"})
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.startswith("id,event_type")

        response = client.get(f"/api/documents/{SAMPLE_DOCUMENT_ID}/audit", params={"format": "xml"})
        assert response.status_code == 400
