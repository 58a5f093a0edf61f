import pytest
from fastapi.testclient import TestClient

import phishshield.pipeline.classify as classify
from phishshield.ai_service.service import AIAssessment
from phishshield.config import Settings
from phishshield.deps import get_settings
from phishshield.main import app
from phishshield.types import RiskLevel


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: Settings()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "ai_configured": False}


def test_scan(client):
    resp = client.post("/scan", json={"text": "urgent: verify now your password at http://secure-paypa1.com"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 100
    assert data["level"] == "High"
    assert data["urls"] == ["http://secure-paypa1.com"]
    assert "Possible brand lookalike" in data["link_findings"][0]["flags"]


def test_scan_empty_text(client):
    resp = client.post("/scan", json={"text": ""})
    assert resp.status_code == 200
    assert resp.json()["signals"] == []
    assert resp.json()["level"] == "Low"


def test_scan_requires_text(client):
    assert client.post("/scan", json={}).status_code == 422


def test_redact(client):
    resp = client.post("/redact", json={"text": "Contact john.doe@example.com"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["masked"] == "Contact [REDACTED EMAIL]"
    assert data["redactions"]["types"]["emails"] == 1
    assert "john.doe@example.com" not in resp.text


def test_ai_analyze_with_stubbed_collaborator(client, monkeypatch):
    monkeypatch.setattr(classify, "assess", lambda text, settings=None: AIAssessment(RiskLevel.MEDIUM, "Odd request."))
    resp = client.post("/ai/analyze", json={"text": "Hello Sam, lunch at noon?"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["heuristics"]["level"] == "Low"
    assert data["ai"] == {"risk_level": "Medium", "reasoning": "Odd request."}
    assert data["final_level"] == "Medium"
    assert data["redacted_text"] == "Hello [REDACTED NAME], lunch at noon?"


def test_ai_analyze_without_collaborator(client, monkeypatch):
    monkeypatch.setattr(classify, "assess", lambda text, settings=None: None)
    resp = client.post("/ai/analyze", json={"text": "CLICK HERE NOW!!!!"})
    data = resp.json()
    assert data["ai"] is None
    assert data["final_level"] == data["heuristics"]["level"] == "Medium"


def test_ai_reply(client, monkeypatch):
    monkeypatch.setattr(classify, "generate_safe_reply", lambda text, settings=None: f"echo:{text}")
    resp = client.post("/ai/reply", json={"text": "Call 555-123-4567"})
    assert resp.status_code == 200
    assert resp.json()["reply"] == "echo:Call [REDACTED PHONE]"


def test_ai_routes_use_injected_settings(monkeypatch):
    configured = Settings(openai_api_key="sk-test")
    seen = []

    def _assess(text, settings=None):
        seen.append(settings)
        return None

    def _reply(text, settings=None):
        seen.append(settings)
        return "ok"

    monkeypatch.setattr(classify, "assess", _assess)
    monkeypatch.setattr(classify, "generate_safe_reply", _reply)
    app.dependency_overrides[get_settings] = lambda: configured
    try:
        with TestClient(app) as c:
            assert c.get("/health").json()["ai_configured"] is True
            assert c.post("/ai/analyze", json={"text": "Lunch at noon?"}).status_code == 200
            assert c.post("/ai/reply", json={"text": "Lunch at noon?"}).json()["reply"] == "ok"
    finally:
        app.dependency_overrides.clear()

    assert seen == [configured, configured]
