from contextlib import contextmanager
from typing import Generic, TypeVar, Type, Optional, Dict, Any, Union, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.db import Base
from app.core.logger import logger

T = TypeVar("T", bound=Base)


class RepositoryError(Exception):
    """Store failure. Never a business-rule outcome; those are StockDeskError."""
    pass


class BaseRepository(Generic[T]):
    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @contextmanager
    def _store_errors(self, action: str, rollback: bool = True) -> Iterator[None]:
        """Turn driver errors into RepositoryError, undoing a half-written unit of work."""
        try:
            yield
        except SQLAlchemyError as e:
            if rollback:
                self.db.rollback()
            logger.error(f"{self.model_name}: {action} failed: {e}")
            raise RepositoryError(f"Failed to {action} {self.model_name}") from e

    def get(self, id_: Union[int, str]) -> Optional[T]:
        with self._store_errors("get", rollback=False):
            return self.db.get(self.model, id_)

    def create(self, obj_in: Dict[str, Any]) -> T:
        """Insert one row and return it refreshed from the store."""
        with self._store_errors("create"):
            db_obj = self.model(**obj_in)
            self.db.add(db_obj)
            self.db.commit()
            self.db.refresh(db_obj)
            return db_obj

    def update(self, id_: Union[int, str], obj_in: Dict[str, Any]) -> Optional[T]:
        """Set the given columns on one row; None if the row is absent."""
        with self._store_errors("update"):
            db_obj = self.db.get(self.model, id_)
            if db_obj is None:
                return None
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
            self.db.commit()
            self.db.refresh(db_obj)
            return db_obj

    def delete(self, id_: Union[int, str]) -> bool:
        with self._store_errors("delete"):
            db_obj = self.db.get(self.model, id_)
            if db_obj is None:
                return False
            self.db.delete(db_obj)
            self.db.commit()
            return True

    def count(self) -> int:
        with self._store_errors("count", rollback=False):
            return self.db.query(self.model).count()
