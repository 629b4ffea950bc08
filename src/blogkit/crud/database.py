"""Engine construction and schema initialization"""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

import blogkit.crud.models  # noqa: F401  (registers tables on SQLModel.metadata)


def make_engine(db_url: str) -> Engine:
    """Create an engine; in-memory and file SQLite URLs allow cross-thread use."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    """Drop and recreate every table."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
