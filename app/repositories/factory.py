from typing import Type, TypeVar, Dict
from sqlalchemy.orm import Session
from app.repositories.base import BaseRepository
from app.repositories.transactions import TransactionRepository
from app.repositories.users import UserRepository
from app.repositories.watchlist import WatchlistRepository

T = TypeVar('T', bound=BaseRepository)


class RepositoryFactory:
    """
    Store handle passed into the services at composition time.
    Hands out one repository instance per name, all bound to the same session.
    """

    _repository_mapping: Dict[str, Type[BaseRepository]] = {
        'transactions': TransactionRepository,
        'users': UserRepository,
        'watchlist': WatchlistRepository,
    }

    def __init__(self, db: Session):
        self.db = db
        self._instances: Dict[str, BaseRepository] = {}

    def get_repository(self, repository_name: str) -> BaseRepository:
        """
        Get a repository instance by name. Creates a singleton instance per factory.

        Raises:
            ValueError: If repository name is not recognized
        """
        if repository_name not in self._repository_mapping:
            available = ', '.join(self._repository_mapping.keys())
            raise ValueError(f"Unknown repository '{repository_name}'. Available: {available}")

        if repository_name not in self._instances:
            repository_class = self._repository_mapping[repository_name]
            self._instances[repository_name] = repository_class(self.db)

        return self._instances[repository_name]

    def get_transaction_repository(self) -> TransactionRepository:
        return self.get_repository('transactions')

    def get_user_repository(self) -> UserRepository:
        return self.get_repository('users')

    def get_watchlist_repository(self) -> WatchlistRepository:
        return self.get_repository('watchlist')
