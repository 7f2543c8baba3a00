import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# USER

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)

    username = Column(String(30), unique=True, index=True, nullable=False)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)

    wwid = Column(String(20), unique=True, index=True, nullable=True)
    spin = Column(String, nullable=True)  # hashed S-PIN

    balance = Column(Numeric(12, 2), nullable=False, default=0)

    api_enabled = Column(Boolean, nullable=False, default=False)
    api_token = Column(String(64), unique=True, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sent_transactions = relationship(
        "Transaction",
        back_populates="sender",
        foreign_keys="Transaction.sender_id",
    )

    received_transactions = relationship(
        "Transaction",
        back_populates="recipient",
        foreign_keys="Transaction.recipient_id",
    )


# TRANSACTIONS

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    reference = Column(String(64), unique=True, nullable=False)

    # null for deposits
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    recipient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)

    type = Column(String(20), nullable=False)
    # DEPOSIT | QR_PAYMENT | API_PAYMENT

    status = Column(String(20), nullable=False, default="COMPLETED")

    # set client-side: sqlite CURRENT_TIMESTAMP only has second resolution
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    sender = relationship(
        "User",
        back_populates="sent_transactions",
        foreign_keys=[sender_id],
    )

    recipient = relationship(
        "User",
        back_populates="received_transactions",
        foreign_keys=[recipient_id],
    )
