from app.models.enums import ALLOWED_TRANSITIONS, TransactionKind, TransactionStatus, UserRole
from app.models.transaction import Transaction
from app.models.user import User
from app.models.watchlist import WatchlistItem

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TransactionKind",
    "TransactionStatus",
    "UserRole",
    "Transaction",
    "User",
    "WatchlistItem",
]
