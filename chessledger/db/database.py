"""Generate database session"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessledger.core.config import LedgerConfig, get_config
from chessledger.db.schema import Base


def build_engine(config: LedgerConfig) -> Engine:
    connect_args = (
        {"check_same_thread": False}
        if config.database_url.startswith("sqlite")
        else {}
    )
    engine = create_engine(
        config.database_url, echo=config.database_echo, connect_args=connect_args
    )
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


@lru_cache
def session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=build_engine(get_config()))


def get_db() -> Generator[Session, None, None]:
    db = session_factory()()
    try:
        yield db
    finally:
        db.close()
