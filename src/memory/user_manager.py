"""Customer records."""

import re
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from src.database.models import User
from src.database.db import SessionLocal
from src.database.schemas import UserResponse
from src.analytics.logger import logger

_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_user_id(user_id: Optional[str]) -> bool:
    """User ids are client-generated UUIDs."""
    return bool(user_id) and bool(_UUID.match(user_id))


class UserManager:
    """Look up and create customers."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def get_user_by_id(self, user_id: str) -> Optional[UserResponse]:
        """Get a user, or ``None`` if absent or the id is not a UUID."""
        if not is_valid_user_id(user_id):
            logger.error(f"Invalid UUID format for user ID: {user_id}")
            return None

        db: Session = self.session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            return UserResponse.model_validate(user) if user else None
        except Exception as e:
            logger.error(f"Error fetching user: {e}")
            return None
        finally:
            db.close()

    def create_user(
        self, user_id: str, name: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[UserResponse]:
        """Create a user with a client-supplied id."""
        if not is_valid_user_id(user_id):
            logger.error(f"Invalid UUID format for user ID: {user_id}")
            return None

        db: Session = self.session_factory()
        try:
            user = User(id=user_id, name=name or "Anonymous User", email=email or None)
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"Created user: {user_id}")
            return UserResponse.model_validate(user)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating user: {e}")
            return None
        finally:
            db.close()

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> Optional[UserResponse]:
        """Apply field updates (name, email, preferred_language)."""
        allowed = {"name", "email", "preferred_language"}
        db: Session = self.session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return None
            for field, value in updates.items():
                if field in allowed:
                    setattr(user, field, value)
            db.commit()
            db.refresh(user)
            return UserResponse.model_validate(user)
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating user: {e}")
            return None
        finally:
            db.close()

    def get_or_create_user(
        self, user_id: str, name: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[UserResponse]:
        """Existing user, or a new one on first contact."""
        user = self.get_user_by_id(user_id)
        if user:
            return user
        logger.info(f"User {user_id} not found, creating new user")
        return self.create_user(user_id, name=name, email=email)


# Global user manager
user_manager = UserManager()
