from dataclasses import dataclass
from typing import List, Optional, Union

from app.core.exceptions import ValidationError
from app.models import Transaction, TransactionStatus
from app.repositories.factory import RepositoryFactory


@dataclass(frozen=True)
class TransactionFilter:
    """Optional criteria for admin listings; unset fields do not filter."""
    status: Optional[Union[TransactionStatus, str]] = None
    owner_id: Optional[str] = None

    def normalized_status(self) -> Optional[TransactionStatus]:
        if self.status is None or self.status == "":
            return None
        try:
            return TransactionStatus(str(getattr(self.status, "value", self.status)).strip().lower())
        except ValueError as e:
            allowed = ", ".join(s.value for s in TransactionStatus)
            raise ValidationError(f"Status must be one of: {allowed}", field="status") from e


class TransactionQueryService:
    """Read side over the transaction store. Results are always newest first."""

    def __init__(self, factory: RepositoryFactory):
        self.factory = factory

    def list_for_owner(
            self,
            owner_id: str,
            limit: Optional[int] = None,
            offset: Optional[int] = None,
    ) -> List[Transaction]:
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise ValidationError("owner_id is required", field="owner_id")
        self._check_page(limit, offset)
        return self.factory.get_transaction_repository().get_by_filters(
            owner_id=owner_id.strip(),
            limit=limit,
            offset=offset,
        )

    def list_all(
            self,
            filters: Optional[TransactionFilter] = None,
            limit: Optional[int] = None,
            offset: Optional[int] = None,
            include_owner_info: bool = False,
    ) -> List[Transaction]:
        filters = filters or TransactionFilter()
        self._check_page(limit, offset)
        owner_id = filters.owner_id.strip() if filters.owner_id else None
        return self.factory.get_transaction_repository().get_by_filters(
            status=filters.normalized_status(),
            owner_id=owner_id or None,
            include_owner_info=include_owner_info,
            limit=limit,
            offset=offset,
        )

    @staticmethod
    def _check_page(limit: Optional[int], offset: Optional[int]) -> None:
        if limit is not None and limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        if offset is not None and offset < 0:
            raise ValidationError("offset must not be negative", field="offset")
