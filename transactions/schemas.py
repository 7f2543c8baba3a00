from pydantic import BaseModel, Field
from decimal import Decimal

from core.models import Transaction


class PayToUserRequest(BaseModel):
    recipientPhone: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    spin: str = Field(pattern=r"^[0-9]{4}$")


class DepositRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    reference: str = Field(min_length=1, max_length=64)


def _party(user) -> dict | None:
    if user is None:
        return None
    return {"username": user.username, "wwid": user.wwid}


def transaction_item(txn: Transaction, user_id: str) -> dict:
    outgoing = txn.sender_id == user_id
    return {
        "id": str(txn.id),
        "reference": txn.reference,
        "amount": float(txn.amount),
        "type": txn.type,
        "status": txn.status,
        "direction": "OUT" if outgoing else "IN",
        "counterparty": _party(txn.recipient if outgoing else txn.sender),
        "createdAt": txn.created_at.isoformat(),
    }
