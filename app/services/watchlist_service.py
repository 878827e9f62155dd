import logging
from typing import List, Optional

from app.core.clock import Clock, SystemClock
from app.core.exceptions import NotFoundError, ValidationError
from app.models import WatchlistItem
from app.repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)


class WatchlistService:
    def __init__(self, factory: RepositoryFactory, clock: Optional[Clock] = None):
        self.factory = factory
        self.clock = clock or SystemClock()

    def _require_user(self, user_id: str) -> None:
        if self.factory.get_user_repository().get(user_id) is None:
            raise NotFoundError("User not found", user_id=user_id)

    def list(self, user_id: str) -> List[WatchlistItem]:
        self._require_user(user_id)
        return self.factory.get_watchlist_repository().get_for_user(user_id)

    def add(self, user_id: str, symbol: str, name: str) -> List[WatchlistItem]:
        if not symbol or not symbol.strip() or not name or not name.strip():
            raise ValidationError("Symbol and name are required")
        self._require_user(user_id)

        repo = self.factory.get_watchlist_repository()
        symbol = symbol.strip().upper()
        if repo.find(user_id, symbol) is not None:
            raise ValidationError("Stock already in watchlist", field="symbol")

        repo.create({
            "user_id": user_id,
            "symbol": symbol,
            "name": name.strip(),
            "added_at": self.clock.now(),
        })
        logger.info(f"User {user_id} added {symbol} to watchlist")
        return repo.get_for_user(user_id)

    def remove(self, user_id: str, symbol: str) -> List[WatchlistItem]:
        if not symbol or not symbol.strip():
            raise ValidationError("Symbol is required", field="symbol")
        self._require_user(user_id)

        repo = self.factory.get_watchlist_repository()
        item = repo.find(user_id, symbol.strip())
        if item is not None:
            repo.delete(item.id)
            logger.info(f"User {user_id} removed {item.symbol} from watchlist")
        return repo.get_for_user(user_id)

    def tracked_symbols(self) -> List[str]:
        return self.factory.get_watchlist_repository().get_all_symbols()
