"""Tests for chat history storage and customer records."""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock, patch

from src.database.models import Chat
from src.memory.conversation_store import ConversationStore
from src.memory.user_manager import UserManager, is_valid_user_id
from src.utils.cache import cache_service


@pytest.fixture
def users(session_factory):
    return UserManager(session_factory=session_factory)


@pytest.fixture
def store(session_factory):
    return ConversationStore(session_factory=session_factory)


@pytest.fixture
def user_id(users):
    user_id = str(uuid.uuid4())
    users.create_user(user_id, name="Asha")
    return user_id


class TestUserManager:
    """Test customer lookup and creation."""

    def test_create_and_get(self, users):
        user_id = str(uuid.uuid4())

        created = users.create_user(user_id, name="Ravi", email="ravi@example.com")
        fetched = users.get_user_by_id(user_id)

        assert created.id == user_id
        assert fetched.name == "Ravi"
        assert fetched.email == "ravi@example.com"

    def test_invalid_ids_rejected(self, users):
        assert not is_valid_user_id("not-a-uuid")
        assert not is_valid_user_id("")
        assert users.get_user_by_id("123") is None
        assert users.create_user("123", name="Nope") is None

    def test_get_or_create_is_idempotent(self, users):
        user_id = str(uuid.uuid4())

        first = users.get_or_create_user(user_id, name="Meera")
        second = users.get_or_create_user(user_id, name="Someone Else")

        assert first.id == second.id
        assert second.name == "Meera"

    def test_default_name(self, users):
        user_id = str(uuid.uuid4())
        assert users.create_user(user_id).name == "Anonymous User"

    def test_update_user(self, users, user_id):
        updated = users.update_user(user_id, {"preferred_language": "hi", "id": "ignored"})

        assert updated.preferred_language == "hi"
        assert updated.id == user_id


class TestConversationStore:
    """Test chat history reads and writes."""

    @pytest.mark.asyncio
    async def test_history_is_newest_window_oldest_first(self, store, user_id):
        for i in range(5):
            await store.save_chat_message(user_id, f"message {i}", "user")

        history = await store.get_chat_history(user_id, limit=3)

        assert [turn.message for turn in history] == ["message 2", "message 3", "message 4"]
        assert all(turn.user_id == user_id for turn in history)

    @pytest.mark.asyncio
    async def test_save_returns_stored_turn(self, store, user_id):
        saved = await store.save_chat_message(user_id, "Hi", "user")

        assert saved.id
        assert saved.role == "user"
        assert saved.message == "Hi"
        assert saved.created_at is not None

    @pytest.mark.asyncio
    async def test_history_for_unknown_user_is_empty(self, store):
        assert await store.get_chat_history(str(uuid.uuid4())) == []

    @pytest.mark.asyncio
    async def test_store_failure_reads_as_empty_history(self):
        def broken_factory():
            raise RuntimeError("database unreachable")

        store = ConversationStore(session_factory=broken_factory)

        assert await store.get_chat_history(str(uuid.uuid4()), limit=20) == []

    @pytest.mark.asyncio
    async def test_cached_history_skips_database(self, user_id):
        def broken_factory():
            raise AssertionError("database should not be queried")

        store = ConversationStore(session_factory=broken_factory)
        cached = [{"role": "user", "message": "from cache"}]

        with patch.object(cache_service, "get_chat_history", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = cached
            history = await store.get_chat_history(user_id, limit=6)

        assert [turn.message for turn in history] == ["from cache"]
        mock_get.assert_awaited_once_with(user_id, 6)

    @pytest.mark.asyncio
    async def test_save_invalidates_cached_history(self, store, user_id):
        with patch.object(cache_service, "invalidate_chat_history", new_callable=AsyncMock) as mock_inv:
            await store.save_chat_message(user_id, "Hello", "user")

        mock_inv.assert_awaited_once_with(user_id)

    @pytest.mark.asyncio
    async def test_chat_summary(self, store, user_id):
        assert await store.get_chat_summary(user_id) == (
            "New customer, no previous conversation history."
        )

        await store.save_chat_message(user_id, "doll for my niece", "user")
        await store.save_chat_message(user_id, "Here are dolls", "assistant")

        assert await store.get_chat_summary(user_id) == (
            "Recent conversation topics: doll for my niece"
        )

    @pytest.mark.asyncio
    async def test_cleanup_removes_only_old_chats(self, store, session_factory, user_id):
        db = session_factory()
        db.add(
            Chat(
                user_id=user_id,
                message="ancient",
                role="user",
                created_at=datetime.now(timezone.utc) - timedelta(days=120),
            )
        )
        db.commit()
        db.close()
        await store.save_chat_message(user_id, "recent", "user")

        assert await store.cleanup_old_chats(user_id, days_old=90) is True

        history = await store.get_chat_history(user_id)
        assert [turn.message for turn in history] == ["recent"]

    @pytest.mark.asyncio
    async def test_chat_stats(self, store, user_id):
        assert store.get_chat_stats(user_id)["total_messages"] == 0

        await store.save_chat_message(user_id, "question", "user")
        await store.save_chat_message(user_id, "answer", "assistant")
        await store.save_chat_message(user_id, "thanks", "user")

        stats = store.get_chat_stats(user_id)
        assert stats["total_messages"] == 3
        assert stats["user_messages"] == 2
        assert stats["assistant_messages"] == 1
        assert stats["first_message"] <= stats["last_message"]
        assert stats["conversation_days"] in (0, 1)
