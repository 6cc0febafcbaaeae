from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from model_attributes import Base

# Register the fixture tables on Base.metadata
from tests.mock_model import MockModel, Widget  # noqa: F401


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite database with the fixture tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(bind=engine)
    with factory() as session:
        yield session


@pytest.fixture
def model() -> MockModel:
    return MockModel()


@pytest.fixture
def persisted_model(session: Session) -> MockModel:
    """A MockModel that has been inserted and committed."""
    model = MockModel(name='Jane Doe')
    session.add(model)
    session.commit()
    return model
