"""Store and retrieve chat history."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from src.database.models import Chat
from src.database.db import SessionLocal
from src.database.schemas import ChatRole, ChatTurn
from src.analytics.logger import logger
from src.utils.cache import cache_service, HISTORY_CACHE_LIMITS


class ConversationStore:
    """Persist chat messages and read them back for memory context."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def _fetch_history(self, user_id: str, limit: int) -> List[ChatTurn]:
        db: Session = self.session_factory()
        try:
            rows = (
                db.query(Chat)
                .filter(Chat.user_id == user_id)
                .order_by(Chat.created_at.desc())
                .limit(limit)
                .all()
            )
            # Newest rows were fetched; hand them back oldest first
            return [ChatTurn.model_validate(row) for row in reversed(rows)]
        finally:
            db.close()

    async def get_chat_history(self, user_id: str, limit: int = 20) -> List[ChatTurn]:
        """Last ``limit`` messages for a user, oldest first.

        Any store failure is logged and reported as an empty history.
        """
        cacheable = limit in HISTORY_CACHE_LIMITS
        if cacheable:
            cached = await cache_service.get_chat_history(user_id, limit)
            if cached is not None:
                logger.debug(f"Cache hit for chat history: {user_id}")
                try:
                    return [ChatTurn.model_validate(item) for item in cached]
                except ValueError as e:
                    logger.warning(f"Discarding malformed cached history for {user_id}: {e}")

        try:
            history = self._fetch_history(user_id, limit)
        except Exception as e:
            logger.error(f"Error fetching chat history: {e}", exc_info=True)
            return []

        if cacheable:
            await cache_service.set_chat_history(
                user_id, [turn.model_dump(mode="json") for turn in history], limit
            )
        return history

    async def save_chat_message(
        self, user_id: str, message: str, role: ChatRole
    ) -> Optional[ChatTurn]:
        """Save a chat message; ``None`` if it could not be stored."""
        db: Session = self.session_factory()
        try:
            chat = Chat(user_id=user_id, message=message, role=role)
            db.add(chat)
            db.commit()
            db.refresh(chat)
            saved = ChatTurn.model_validate(chat)
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving chat message: {e}")
            return None
        finally:
            db.close()

        await cache_service.invalidate_chat_history(user_id)
        return saved

    async def get_chat_summary(self, user_id: str) -> str:
        """One-line summary of recent user topics."""
        recent_chats = await self.get_chat_history(user_id, 10)
        if not recent_chats:
            return "New customer, no previous conversation history."

        topics = ", ".join(
            turn.message[:100] for turn in recent_chats if turn.role == "user"
        )
        return f"Recent conversation topics: {topics}"

    async def cleanup_old_chats(self, user_id: str, days_old: int = 90) -> bool:
        """Delete a user's messages older than ``days_old`` days."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        db: Session = self.session_factory()
        try:
            deleted = (
                db.query(Chat)
                .filter(Chat.user_id == user_id, Chat.created_at < cutoff)
                .delete(synchronize_session=False)
            )
            db.commit()
            logger.info(f"Deleted {deleted} chats older than {days_old} days for {user_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Error cleaning up old chats: {e}")
            return False
        finally:
            db.close()

        await cache_service.invalidate_chat_history(user_id)
        return True

    def get_chat_stats(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Message counts and conversation span for a user."""
        db: Session = self.session_factory()
        try:
            rows = (
                db.query(Chat.role, Chat.created_at)
                .filter(Chat.user_id == user_id)
                .order_by(Chat.created_at.asc())
                .all()
            )
        except Exception as e:
            logger.error(f"Error fetching chat stats: {e}")
            return None
        finally:
            db.close()

        first_message = rows[0].created_at if rows else None
        last_message = rows[-1].created_at if rows else None
        conversation_days = 0
        if first_message and last_message:
            span = last_message - first_message
            conversation_days = span.days + (1 if span.seconds or span.microseconds else 0)

        return {
            "total_messages": len(rows),
            "user_messages": sum(1 for row in rows if row.role == "user"),
            "assistant_messages": sum(1 for row in rows if row.role == "assistant"),
            "first_message": first_message,
            "last_message": last_message,
            "conversation_days": conversation_days,
        }


# Global conversation store
conversation_store = ConversationStore()
