from uuid import uuid4

from sqlalchemy import Column, String, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.core.db import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    username = Column(String(64), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(16), nullable=False, default="user")
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    country = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    bio = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship(
        "Transaction",
        foreign_keys="Transaction.owner_id",
        back_populates="owner",
    )
    watchlist = relationship(
        "WatchlistItem",
        back_populates="user",
        order_by="WatchlistItem.added_at",
        cascade="all, delete-orphan",
    )
