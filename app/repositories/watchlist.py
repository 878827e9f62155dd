from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models import WatchlistItem
from app.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class WatchlistRepository(BaseRepository[WatchlistItem]):
    def __init__(self, db: Session):
        super().__init__(db, WatchlistItem)

    def get_for_user(self, user_id: str) -> List[WatchlistItem]:
        """
        Watchlist entries for a user, oldest first.
        """
        try:
            return (
                self.db.query(WatchlistItem)
                .filter(WatchlistItem.user_id == user_id)
                .order_by(WatchlistItem.added_at, WatchlistItem.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting watchlist for user {user_id}: {e}")
            raise RepositoryError("Failed to get watchlist") from e

    def find(self, user_id: str, symbol: str) -> Optional[WatchlistItem]:
        try:
            return (
                self.db.query(WatchlistItem)
                .filter(WatchlistItem.user_id == user_id, WatchlistItem.symbol == symbol.upper())
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error finding {symbol} in watchlist of user {user_id}: {e}")
            raise RepositoryError("Failed to find watchlist entry") from e

    def get_all_symbols(self) -> List[str]:
        """
        Get all unique symbols watched by any user.
        """
        try:
            result = (
                self.db.query(WatchlistItem.symbol)
                .distinct()
                .order_by(WatchlistItem.symbol)
                .all()
            )
            return [row.symbol for row in result]

        except SQLAlchemyError as e:
            logger.error(f"Error getting watched symbols: {e}")
            raise RepositoryError("Failed to get watched symbols") from e
