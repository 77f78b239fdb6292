"""Tests for API endpoints."""
import uuid

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from src.api.dependencies import get_support_agent
from src.api.main import app
from src.agent.support_agent import SupportAgent
from src.context.context_cache import ContextCache
from src.database.schemas import ChatTurn
from src.matching.product_matcher import ProductMatcher
from src.memory.conversation_store import ConversationStore, conversation_store
from src.memory.user_manager import UserManager

client = TestClient(app)


@pytest.fixture
def agent(clock, context_documents, session_factory):
    llm_client = MagicMock()
    llm_client.generate = AsyncMock(return_value="We have a great push car.")
    llm_client.configured = True
    agent = SupportAgent(
        context_cache=ContextCache(clock=clock, ttl_seconds=300, load_timeout=1.0),
        product_matcher=ProductMatcher(clock=clock, ttl_seconds=600),
        loader=AsyncMock(return_value=context_documents),
        llm_client=llm_client,
        store=ConversationStore(session_factory=session_factory),
        users=UserManager(session_factory=session_factory),
    )
    app.dependency_overrides[get_support_agent] = lambda: agent
    yield agent
    app.dependency_overrides.clear()


def test_root():
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_liveness():
    response = client.get("/api/health/liveness")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_health(agent):
    """Test health endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ["healthy", "degraded", "unhealthy"]
    assert data["checks"]["llm_provider"]["configured"] is True
    # Cache is disabled and nothing is loaded yet
    assert data["checks"]["cache"]["status"] == "degraded"
    assert data["checks"]["context_cache"]["cache"] == "empty"


class TestChatEndpoint:
    """Test POST /api/ai-chat."""

    def test_chat_returns_both_messages(self, agent):
        user_id = str(uuid.uuid4())

        response = client.post(
            "/api/ai-chat",
            json={"userId": user_id, "message": "car for 3 year old boy", "userName": "Asha"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user_message"]["message"] == "car for 3 year old boy"
        assert data["user_message"]["user_id"] == user_id
        assert data["assistant_message"]["role"] == "assistant"
        assert data["assistant_message"]["message"] == "We have a great push car."

    @pytest.mark.parametrize(
        "payload",
        [
            {"message": "hello"},
            {"userId": str(uuid.uuid4())},
            {"userId": "", "message": "hello"},
            {"userId": str(uuid.uuid4()), "message": ""},
        ],
    )
    def test_missing_fields(self, agent, payload):
        response = client.post("/api/ai-chat", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields: userId and message"
        agent.llm_client.generate.assert_not_awaited()

    def test_context_unavailable_is_500(self, agent):
        agent.loader = AsyncMock(return_value=None)

        response = client.post(
            "/api/ai-chat", json={"userId": str(uuid.uuid4()), "message": "hello"}
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to load system context"

    def test_invalid_user_id_is_500(self, agent):
        response = client.post("/api/ai-chat", json={"userId": "abc", "message": "hello"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create or retrieve user"

    def test_unexpected_error_is_hidden(self, agent):
        agent.users = MagicMock()
        agent.users.get_or_create_user.side_effect = RuntimeError("boom")

        response = client.post(
            "/api/ai-chat", json={"userId": str(uuid.uuid4()), "message": "hello"}
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"


class TestHistoryEndpoint:
    """Test POST /api/chat/history."""

    def test_history_returned(self):
        user_id = str(uuid.uuid4())
        turns = [
            ChatTurn(id="1", user_id=user_id, role="user", message="hi"),
            ChatTurn(id="2", user_id=user_id, role="assistant", message="hello!"),
        ]

        with patch.object(
            conversation_store, "get_chat_history", new_callable=AsyncMock
        ) as mock_history:
            mock_history.return_value = turns
            response = client.post("/api/chat/history", json={"userId": user_id, "limit": 10})

        assert response.status_code == 200
        data = response.json()
        assert [turn["message"] for turn in data["chat_history"]] == ["hi", "hello!"]
        mock_history.assert_awaited_once_with(user_id, 10)

    def test_history_default_limit(self):
        with patch.object(
            conversation_store, "get_chat_history", new_callable=AsyncMock
        ) as mock_history:
            mock_history.return_value = []
            response = client.post("/api/chat/history", json={"user_id": "u-1"})

        assert response.status_code == 200
        assert response.json()["chat_history"] == []
        mock_history.assert_awaited_once_with("u-1", 50)

    def test_history_requires_user(self):
        response = client.post("/api/chat/history", json={})
        assert response.status_code == 400

    def test_history_limit_validated(self):
        response = client.post("/api/chat/history", json={"userId": "u-1", "limit": 0})
        assert response.status_code == 422


class TestPerformanceEndpoints:
    """Test cache monitoring and warm-up."""

    def test_stats_before_warm_up(self, agent):
        response = client.get("/api/performance/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["context_cache"]["status"] == "empty"
        assert data["product_index"] == {"indexed": 0, "last_updated": None, "cache_age_ms": 0}
        assert "uptime_seconds" in data["system"]

    def test_warm_cache(self, agent):
        response = client.post("/api/performance/warm-cache", json={"force": True})

        assert response.status_code == 200
        assert response.json()["success"] is True

        stats = client.get("/api/performance/stats").json()
        assert stats["context_cache"]["status"] == "valid"
        assert stats["product_index"]["indexed"] == 5

    def test_warm_cache_failure(self, agent):
        agent.loader = AsyncMock(return_value=None)

        response = client.post("/api/performance/warm-cache", json={})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to warm context cache"
