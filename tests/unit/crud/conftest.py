"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

import blogkit.crud.models  # noqa: F401
from blogkit.core.models import PostInput


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


def make_blocks(*paragraphs: str) -> list[dict]:
    return [{"type": "paragraph", "content": [{"type": "text", "text": p}]} for p in paragraphs]


@pytest.fixture(name="make_input")
def make_input_fixture():
    """Factory for PostInput; keyword args override the defaults."""
    def _make(**overrides) -> PostInput:
        data = {
            "title": "Hello World",
            "content": make_blocks("First paragraph of the post."),
        }
        data.update(overrides)
        return PostInput.model_validate(data)
    return _make


@pytest.fixture(name="blocks")
def blocks_fixture():
    return make_blocks
