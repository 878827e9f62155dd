from app.repositories.base import BaseRepository, RepositoryError
from app.repositories.transactions import TransactionRepository
from app.repositories.users import UserRepository
from app.repositories.watchlist import WatchlistRepository
from app.repositories.factory import RepositoryFactory

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "TransactionRepository",
    "UserRepository",
    "WatchlistRepository",
    "RepositoryFactory"
]
