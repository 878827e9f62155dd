# tests/conftest.py
import os

# must be set before any app module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.clock import DeterministicClock
from app.core.db import Base
from app.models import TransactionKind, UserRole
from app.repositories import RepositoryFactory
from app.services.transaction_query import TransactionQueryService
from app.services.transaction_workflow import TransactionWorkflow


def _enable_sqlite_foreign_keys(engine):
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_sqlite_engine(url: str = "sqlite://"):
    if url == "sqlite://":
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False, "timeout": 30})
    _enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def make_engine():
    return make_sqlite_engine


@pytest.fixture
def engine():
    engine = make_sqlite_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def factory(db_session) -> RepositoryFactory:
    return RepositoryFactory(db_session)


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock()


@pytest.fixture
def workflow(factory, clock) -> TransactionWorkflow:
    return TransactionWorkflow(factory, clock=clock)


@pytest.fixture
def queries(factory) -> TransactionQueryService:
    return TransactionQueryService(factory)


@pytest.fixture
def owner(factory):
    return factory.get_user_repository().create_user("alice", "alice@example.com")


@pytest.fixture
def other_user(factory):
    return factory.get_user_repository().create_user("bob", "bob@example.com")


@pytest.fixture
def admin(factory):
    return factory.get_user_repository().create_user("root", "root@example.com", role=UserRole.ADMIN)


@pytest.fixture
def submit_order(workflow, owner):
    """Submit a pending order with sensible defaults; keyword overrides per test."""
    def _submit(**overrides):
        fields = {
            "owner_id": owner.id,
            "stock_symbol": "aapl",
            "stock_name": "Apple",
            "kind": TransactionKind.BUY,
            "quantity": 10,
            "unit_price": Decimal("150.00"),
        }
        fields.update(overrides)
        return workflow.submit(**fields)

    return _submit
