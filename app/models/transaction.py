from uuid import uuid4

from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from app.core.db import Base


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_transactions_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_transactions_unit_price_non_negative"),
        CheckConstraint("kind IN ('buy', 'sell')", name="ck_transactions_kind"),
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_transactions_status"),
        CheckConstraint(
            "(status = 'rejected') = (rejection_reason IS NOT NULL)",
            name="ck_transactions_reason_iff_rejected",
        ),
        CheckConstraint(
            "(status = 'pending') = (decided_by IS NULL)",
            name="ck_transactions_decider_iff_decided",
        ),
        Index("ix_transactions_owner_created", "owner_id", "created_at"),
        Index("ix_transactions_status_created", "status", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    stock_symbol = Column(String(16), nullable=False)
    stock_name = Column(String, nullable=False)
    kind = Column(String(8), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(20, 8), nullable=False)
    total_amount = Column(Numeric(20, 8), nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    decided_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    rejection_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    owner = relationship("User", foreign_keys=[owner_id], back_populates="transactions")
    decider = relationship("User", foreign_keys=[decided_by])
