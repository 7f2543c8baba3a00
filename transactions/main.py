from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.auth import ensure_spin, get_current_user
from core.database import get_db
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, forbidden, not_found
from core.models import Transaction, User
from core.rate_limit import limiter
from core.storage import UserStorage, get_storage
from transactions.schemas import DepositRequest, PayToUserRequest, transaction_item
from transactions.service import deposit, transfer

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

TRANSACTION_TYPES = ("ALL", "DEPOSIT", "QR_PAYMENT", "API_PAYMENT")


@router.post("/pay-to-user")
@limiter.limit(settings.PAYMENT_RATE_LIMIT)
def pay_to_user(
    request: Request,
    payload: PayToUserRequest,
    db: Session = Depends(get_db),
    storage: UserStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    ensure_spin(current_user, payload.spin)

    recipient = storage.get_user_by_phone(payload.recipientPhone)
    if not recipient:
        raise not_found(ErrorCode.RECIPIENT_NOT_FOUND, ErrorMessage.RECIPIENT_NOT_FOUND)

    txn = transfer(db, current_user.id, recipient.id, payload.amount, "QR_PAYMENT")

    return {
        "success": True,
        "transactionId": str(txn.id),
        "reference": txn.reference,
        "amount": float(txn.amount),
        "newBalance": float(txn.sender.balance),
        "recipient": {
            "username": txn.recipient.username,
            "wwid": txn.recipient.wwid,
            "phone": txn.recipient.phone,
        },
        "status": txn.status,
        "createdAt": txn.created_at.isoformat(),
    }


@router.post("/deposit", status_code=status.HTTP_201_CREATED)
def deposit_funds(
    payload: DepositRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not settings.DEPOSITS_ENABLED:
        raise forbidden(ErrorCode.DEPOSITS_DISABLED, ErrorMessage.DEPOSITS_DISABLED)

    txn = deposit(db, current_user.id, payload.amount, payload.reference)

    return {
        "success": True,
        "transactionId": str(txn.id),
        "reference": txn.reference,
        "amount": float(txn.amount),
        "newBalance": float(txn.recipient.balance),
        "status": txn.status,
        "createdAt": txn.created_at.isoformat(),
    }


@router.get("/history")
def transaction_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    type: str = Query("ALL", pattern="^(" + "|".join(TRANSACTION_TYPES) + ")$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    me_id = current_user.id
    query = db.query(Transaction).filter(
        or_(Transaction.sender_id == me_id, Transaction.recipient_id == me_id)
    )

    if type != "ALL":
        query = query.filter(Transaction.type == type)

    total = query.count()
    txns = (
        query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return {
        "data": [transaction_item(t, me_id) for t in txns],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset
        }
    }
