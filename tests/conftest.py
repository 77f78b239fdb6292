"""Pytest configuration and fixtures for tests."""
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment variables BEFORE any imports
os.environ["LLM_API_KEY"] = ""
os.environ["DATABASE_URL"] = "sqlite:///./test_support_assistant.db"
os.environ["CACHE_ENABLED"] = "false"
os.environ["CONTEXT_SOURCE"] = "local"
os.environ["LOG_FILE"] = ""
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.context.context_cache import ContextDocuments
from src.database.db import Base
from src.database import models  # noqa: F401
from src.utils.clock import Clock


SAMPLE_CATALOG = "\n".join(
    [
        "https://thegurtoys.com/products/gurtoy-push-car-rabbit-car-for-kids",
        "https://thegurtoys.com/products/gurtoy-pink-doll-house-for-girls-with-accessories",
        "https://thegurtoys.com/products/gurtoy-kids-bike-blue",
        "",
        "Our bestsellers:",
        "https://thegurtoys.com/products/gurtoy-wooden-abacus",
        "https://thegurtoys.com/products/gurtoy-baby-stroller-navy",
        "https://example.com/products/not-our-shop",
    ]
)


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = None):
        self._now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        self._now += timedelta(seconds=seconds)
        return self._now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_catalog():
    return SAMPLE_CATALOG


@pytest.fixture
def context_documents():
    return ContextDocuments(
        product=SAMPLE_CATALOG,
        contact="Call us on 9592020898",
        privacy="We never sell your data.",
        detail="Gurtoy sells toys for children of all ages.",
    )


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
