"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessledger.core.config import LedgerConfig
from chessledger.db.schema import Base
from chessledger.db.sql_repository import SQLLedgerRepository
from chessledger.services.ledger_service import LedgerService

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repository(db_session_repo: Session) -> SQLLedgerRepository:
    return SQLLedgerRepository(db_session_repo)


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig(database_url=DATABASE_URL)


@pytest.fixture
def service(repository: SQLLedgerRepository, config: LedgerConfig) -> LedgerService:
    return LedgerService(repository, config)
