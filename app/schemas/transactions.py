from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict

from app.models.enums import TransactionKind, TransactionStatus


class TransactionCreate(BaseModel):
    # presence and ranges are checked by the workflow so every input
    # problem surfaces as the same ValidationError
    stock_symbol: str | None = None
    stock_name: str | None = None
    kind: str | None = None
    quantity: int | None = None
    unit_price: Decimal | None = None


class RejectRequest(BaseModel):
    reason: str | None = None


class UserSummary(BaseModel):
    id: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class TransactionOut(BaseModel):
    id: str
    owner_id: str
    stock_symbol: str
    stock_name: str
    kind: TransactionKind
    quantity: int
    unit_price: float
    total_amount: float
    status: TransactionStatus
    decided_by: str | None
    rejection_reason: str | None
    created_at: datetime
    updated_at: datetime
    owner: UserSummary | None = None
    decider: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class TransactionResult(BaseModel):
    message: str
    transaction: TransactionOut


class TransactionList(BaseModel):
    count: int
    transactions: List[TransactionOut]
