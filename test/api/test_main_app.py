"""
API tests for the assembled application in backend/mcqgen/main.py.
Tests: router wiring, request-ID header, CORS, unhandled error handler.
"""

import sys
import os
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from mcqgen.core.config import settings
from mcqgen.main import app


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


class TestAppWiring:

    def test_health_mounted(self, client):
        r = client.get("/health/simple")
        assert r.status_code == 200
        assert len(r.headers["X-Request-ID"]) == 8

    def test_quiz_mounted(self, client):
        with patch("mcqgen.services.quiz.generator.ainvoke_model", new=AsyncMock(return_value="[]")):
            r = client.post("/quiz/generate", json={"subject": "Polity", "count": 2})
        assert r.status_code == 200
        assert r.json() == {"questions": [], "requested": 2, "generated": 0}

    def test_cors_preflight(self, client):
        origin = settings.CORS_ORIGINS[0]
        r = client.options(
            "/quiz/generate",
            headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        )
        assert r.headers.get("access-control-allow-origin") == origin

    def test_unhandled_error_is_500(self, client):
        with patch(
            "mcqgen.services.quiz.generator.ainvoke_model",
            new=AsyncMock(side_effect=KeyError("boom")),
        ):
            r = client.post("/quiz/generate", json={"subject": "Polity", "count": 2})
        assert r.status_code == 500
        assert r.json()["detail"] == "Internal server error"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
