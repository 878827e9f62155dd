"""
Approval workflow for buy/sell requests.

A transaction is submitted by its owner as pending and is decided exactly
once by an admin, to approved or rejected. This module is the only writer
of status, decided_by, rejection_reason and total_amount.

Decisions are conditional updates on the store (set the decision fields
only while status is still pending), so two admins deciding the same
record concurrently resolve to one winner; the other gets
InvalidStateError and the record is left as the winner wrote it.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from app.core.clock import Clock, SystemClock
from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models import ALLOWED_TRANSITIONS, Transaction, TransactionKind, TransactionStatus
from app.repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)


# column bounds: String(16) symbol, 32-bit Integer quantity, Numeric(20, 8) amounts
MAX_SYMBOL_LENGTH = 16
MAX_QUANTITY = 2_147_483_647
PRICE_PLACES = 8
MAX_AMOUNT = Decimal(10) ** 12


def compute_total_amount(quantity: int, unit_price: Decimal) -> Decimal:
    return Decimal(quantity) * unit_price


def _require_text(value: Any, field: str, message: Optional[str] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message or f"{field} is required", field=field)
    return value.strip()


def _parse_kind(value: Any) -> TransactionKind:
    if isinstance(value, TransactionKind):
        return value
    if isinstance(value, str):
        try:
            return TransactionKind(value.strip().lower())
        except ValueError:
            pass
    raise ValidationError("Transaction type must be buy or sell", field="kind")


def _parse_quantity(value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be a whole number", field="quantity")
    if value < 1:
        raise ValidationError("Quantity must be at least 1", field="quantity")
    if value > MAX_QUANTITY:
        raise ValidationError(f"Quantity must not exceed {MAX_QUANTITY}", field="quantity")
    return value


def _parse_unit_price(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError("Price is required", field="unit_price")
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Price must be a number", field="unit_price") from e
    if not price.is_finite():
        raise ValidationError("Price must be a finite number", field="unit_price")
    if price < 0:
        raise ValidationError("Price must not be negative", field="unit_price")
    if price >= MAX_AMOUNT:
        raise ValidationError("Price is too large", field="unit_price")
    # stored as Numeric(20, 8); the total must be derived from the stored value
    stored = price.quantize(Decimal(1).scaleb(-PRICE_PLACES))
    if stored != price:
        raise ValidationError(f"Price allows at most {PRICE_PLACES} decimal places", field="unit_price")
    return stored


class TransactionWorkflow:
    def __init__(self, factory: RepositoryFactory, clock: Optional[Clock] = None):
        self.factory = factory
        self.clock = clock or SystemClock()

    @property
    def _repo(self):
        return self.factory.get_transaction_repository()

    def get(self, transaction_id: str) -> Transaction:
        transaction_id = _require_text(transaction_id, "transaction_id")
        record = self._repo.get(transaction_id)
        if record is None:
            raise NotFoundError("Transaction not found", transaction_id=transaction_id)
        return record

    def submit(
            self,
            owner_id: str,
            stock_symbol: str,
            stock_name: str,
            kind: Any,
            quantity: Any,
            unit_price: Any,
    ) -> Transaction:
        """
        Create a pending transaction for `owner_id`.

        Every field is validated before anything is written; on failure
        ValidationError names the offending field and the store is untouched.
        """
        owner_id = _require_text(owner_id, "owner_id")
        symbol = _require_text(stock_symbol, "stock_symbol", "Stock symbol is required").upper()
        if len(symbol) > MAX_SYMBOL_LENGTH:
            raise ValidationError(
                f"Stock symbol must be at most {MAX_SYMBOL_LENGTH} characters", field="stock_symbol"
            )
        name = _require_text(stock_name, "stock_name", "Stock name is required")
        kind = _parse_kind(kind)
        quantity = _parse_quantity(quantity)
        unit_price = _parse_unit_price(unit_price)
        total_amount = compute_total_amount(quantity, unit_price)
        if total_amount >= MAX_AMOUNT:
            raise ValidationError("Total amount is too large", field="unit_price")

        now = self.clock.now()
        record = self._repo.create({
            "owner_id": owner_id,
            "stock_symbol": symbol,
            "stock_name": name,
            "kind": kind.value,
            "quantity": quantity,
            "unit_price": unit_price,
            "total_amount": total_amount,
            "status": TransactionStatus.PENDING.value,
            "decided_by": None,
            "rejection_reason": None,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(
            f"Transaction {record.id} submitted by {owner_id}: "
            f"{kind.value} {quantity} {symbol} @ {unit_price}"
        )
        return record

    def approve(self, transaction_id: str, acting_admin_id: str) -> Transaction:
        transaction_id = _require_text(transaction_id, "transaction_id")
        admin_id = _require_text(acting_admin_id, "acting_admin_id")
        return self._decide(transaction_id, TransactionStatus.APPROVED, {"decided_by": admin_id})

    def reject(self, transaction_id: str, acting_admin_id: str, reason: str) -> Transaction:
        transaction_id = _require_text(transaction_id, "transaction_id")
        admin_id = _require_text(acting_admin_id, "acting_admin_id")
        reason = _require_text(reason, "reason", "Rejection reason required")
        return self._decide(
            transaction_id,
            TransactionStatus.REJECTED,
            {"decided_by": admin_id, "rejection_reason": reason},
        )

    def _decide(self, transaction_id: str, target: TransactionStatus, values: Dict[str, Any]) -> Transaction:
        source = TransactionStatus.PENDING
        if target not in ALLOWED_TRANSITIONS[source]:
            raise InvalidStateError(f"No transition from {source.value} to {target.value}")

        values = {**values, "status": target.value, "updated_at": self.clock.now()}
        if not self._repo.compare_and_set_status(transaction_id, source, values):
            current = self._repo.get(transaction_id)
            if current is None:
                raise NotFoundError("Transaction not found", transaction_id=transaction_id)
            current_status = TransactionStatus(current.status)
            logger.warning(
                f"Refused to mark transaction {transaction_id} {target.value}: "
                f"status is already {current_status.value}"
            )
            message = (
                f"Transaction already {current_status.value}; decisions are final"
                if current_status.is_terminal
                else f"Only pending transactions can be {target.value}"
            )
            raise InvalidStateError(
                message,
                current_status=current_status.value,
                transaction_id=transaction_id,
            )

        record = self._repo.get(transaction_id)
        logger.info(f"Transaction {transaction_id} {target.value} by {values['decided_by']}")
        return record
