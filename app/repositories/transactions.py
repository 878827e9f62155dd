from typing import List, Dict, Any, Optional, Union

from sqlalchemy import update
from sqlalchemy.orm import joinedload, Session, noload
from sqlalchemy.exc import SQLAlchemyError
from app.models import Transaction, TransactionStatus
from app.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class TransactionRepository(BaseRepository[Transaction]):
    """
    Transaction store. Records are append-only apart from the single
    guarded status transition; generic update and delete are refused.
    """

    def __init__(self, db: Session):
        super().__init__(db, Transaction)

    def get_by_filters(
            self,
            status: Optional[Union[TransactionStatus, str]] = None,
            owner_id: Optional[str] = None,
            include_owner_info: bool = False,
            limit: Optional[int] = None,
            offset: Optional[int] = None,
    ) -> List[Transaction]:
        """
        Newest-first listing; each filter is applied only when given.
        """
        try:
            query = self.db.query(Transaction)

            if include_owner_info:
                query = query.options(joinedload(Transaction.owner), joinedload(Transaction.decider))
            else:
                query = query.options(noload(Transaction.owner), noload(Transaction.decider))

            if status is not None:
                query = query.filter(Transaction.status == TransactionStatus(status).value)

            if owner_id is not None:
                query = query.filter(Transaction.owner_id == owner_id)

            query = query.order_by(Transaction.created_at.desc(), Transaction.id.desc())

            if offset:
                query = query.offset(offset)
            if limit:
                query = query.limit(limit)

            return query.all()

        except SQLAlchemyError as e:
            logger.error(f"Error filtering transactions: {e}")
            raise RepositoryError("Failed to filter transactions") from e

    def compare_and_set_status(
            self,
            id_: str,
            expected: TransactionStatus,
            values: Dict[str, Any],
    ) -> bool:
        """
        Apply `values` only if the row's status is still `expected`.
        Returns False when no row matched (absent or already moved on).
        """
        try:
            stmt = (
                update(Transaction)
                .where(Transaction.id == id_, Transaction.status == expected.value)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                return False

            self.db.commit()
            return True

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating status of transaction {id_}: {e}")
            raise RepositoryError("Failed to update transaction status") from e

    def update(self, id_: Union[int, str], obj_in: Dict[str, Any]) -> Optional[Transaction]:
        raise RepositoryError("Transactions change only through compare_and_set_status")

    def delete(self, id_: Union[int, str]) -> bool:
        raise RepositoryError("Transactions are never deleted")
