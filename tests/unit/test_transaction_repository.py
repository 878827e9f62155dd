# tests/unit/test_transaction_repository.py
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import TransactionStatus
from app.repositories import RepositoryError


def _row(owner_id, **overrides):
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    values = {
        "owner_id": owner_id,
        "stock_symbol": "AAPL",
        "stock_name": "Apple",
        "kind": "buy",
        "quantity": 1,
        "unit_price": Decimal("10"),
        "total_amount": Decimal("10"),
        "status": "pending",
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return values


def test_update_and_delete_are_refused(factory, submit_order):
    record = submit_order()
    repo = factory.get_transaction_repository()

    with pytest.raises(RepositoryError):
        repo.update(record.id, {"status": "approved"})
    with pytest.raises(RepositoryError):
        repo.delete(record.id)

    assert repo.count() == 1
    assert repo.get(record.id).status == TransactionStatus.PENDING


def test_compare_and_set_unknown_id_returns_false(factory):
    repo = factory.get_transaction_repository()
    assert repo.compare_and_set_status("missing", TransactionStatus.PENDING, {"status": "approved"}) is False


def test_compare_and_set_requires_expected_status(factory, submit_order, admin):
    record = submit_order()
    repo = factory.get_transaction_repository()
    values = {"status": "approved", "decided_by": admin.id}

    assert repo.compare_and_set_status(record.id, TransactionStatus.REJECTED, values) is False
    assert repo.compare_and_set_status(record.id, TransactionStatus.PENDING, values) is True
    assert repo.compare_and_set_status(record.id, TransactionStatus.PENDING, values) is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"status": "rejected"},
        {"status": "pending", "rejection_reason": "stray"},
        {"status": "approved"},
        {"quantity": 0},
        {"unit_price": Decimal("-1")},
        {"kind": "hold"},
        {"status": "cancelled"},
    ],
)
def test_store_refuses_rows_breaking_invariants(factory, owner, overrides):
    repo = factory.get_transaction_repository()

    with pytest.raises(RepositoryError) as exc_info:
        repo.create(_row(owner.id, **overrides))

    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert repo.count() == 0


def test_store_accepts_consistent_decided_row(factory, owner, admin):
    repo = factory.get_transaction_repository()
    record = repo.create(_row(owner.id, status="rejected", decided_by=admin.id, rejection_reason="no"))
    assert record.status == "rejected"


def test_unknown_repository_name(factory):
    with pytest.raises(ValueError):
        factory.get_repository("portfolio")
