# tests/concurrency/test_concurrent_decisions.py
"""
Two admins deciding the same pending transaction at once: exactly one
decision lands, the other sees InvalidStateError.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from app.core.clock import DeterministicClock
from app.core.exceptions import InvalidStateError
from app.models import TransactionKind, TransactionStatus, UserRole
from app.repositories import RepositoryFactory
from app.services.transaction_workflow import TransactionWorkflow


@pytest.fixture
def file_engine(tmp_path, make_engine):
    engine = make_engine(f"sqlite:///{tmp_path / 'desk.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def seeded(file_engine):
    Session = sessionmaker(bind=file_engine, autocommit=False, autoflush=False)
    with Session() as session:
        factory = RepositoryFactory(session)
        users = factory.get_user_repository()
        owner = users.create_user("alice", "alice@example.com")
        admins = [
            users.create_user("ops1", "ops1@example.com", role=UserRole.ADMIN).id,
            users.create_user("ops2", "ops2@example.com", role=UserRole.ADMIN).id,
        ]
        record = TransactionWorkflow(factory).submit(
            owner_id=owner.id,
            stock_symbol="AAPL",
            stock_name="Apple",
            kind=TransactionKind.BUY,
            quantity=5,
            unit_price=Decimal("100"),
        )
        return Session, record.id, admins


def _race(seeded, decisions):
    Session, transaction_id, admins = seeded
    barrier = threading.Barrier(len(decisions))

    def _decide(admin_id, decision):
        with Session() as session:
            workflow = TransactionWorkflow(RepositoryFactory(session), clock=DeterministicClock())
            barrier.wait()
            try:
                if decision == "approve":
                    workflow.approve(transaction_id, admin_id)
                else:
                    workflow.reject(transaction_id, admin_id, "limit exceeded")
                return "ok"
            except InvalidStateError:
                return "conflict"

    with ThreadPoolExecutor(max_workers=len(decisions)) as pool:
        futures = [pool.submit(_decide, admin_id, d) for admin_id, d in zip(admins, decisions)]
        results = [f.result(timeout=60) for f in futures]

    with Session() as session:
        final = RepositoryFactory(session).get_transaction_repository().get(transaction_id)
        return results, (final.status, final.decided_by, final.rejection_reason)


def test_concurrent_approvals_exactly_one_wins(seeded):
    results, (status, decided_by, reason) = _race(seeded, ["approve", "approve"])

    assert sorted(results) == ["conflict", "ok"]
    assert status == TransactionStatus.APPROVED
    assert decided_by in seeded[2]
    assert reason is None


def test_concurrent_approve_and_reject_exactly_one_wins(seeded):
    results, (status, decided_by, reason) = _race(seeded, ["approve", "reject"])

    assert sorted(results) == ["conflict", "ok"]
    winner = ["approve", "reject"][results.index("ok")]
    if winner == "approve":
        assert (status, decided_by, reason) == (TransactionStatus.APPROVED, seeded[2][0], None)
    else:
        assert (status, decided_by, reason) == (TransactionStatus.REJECTED, seeded[2][1], "limit exceeded")
