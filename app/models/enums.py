from enum import Enum
from typing import Dict, FrozenSet


class TransactionKind(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def terminal(cls) -> FrozenSet["TransactionStatus"]:
        return frozenset({cls.APPROVED, cls.REJECTED})

    @property
    def is_terminal(self) -> bool:
        return self in self.terminal()


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


ALLOWED_TRANSITIONS: Dict[TransactionStatus, FrozenSet[TransactionStatus]] = {
    TransactionStatus.PENDING: frozenset({TransactionStatus.APPROVED, TransactionStatus.REJECTED}),
    TransactionStatus.APPROVED: frozenset(),
    TransactionStatus.REJECTED: frozenset(),
}
