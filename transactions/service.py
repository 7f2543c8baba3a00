import logging
import uuid
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ErrorCode, ErrorMessage, bad_request, conflict, not_found
from core.exceptions import AppException
from core.models import Transaction, User

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def new_reference() -> str:
    return f"WW{uuid.uuid4().hex[:20].upper()}"


def _money(amount) -> Decimal:
    return Decimal(str(amount)).quantize(CENTS)


def transfer(db: Session, sender_id: str, recipient_id: str, amount, txn_type: str) -> Transaction:
    """Move ``amount`` from sender to recipient and record it.

    Both rows are locked in id order so two opposite transfers cannot
    deadlock. Nothing is written unless every check passes.
    """
    amount = _money(amount)
    if amount <= 0:
        raise bad_request(ErrorCode.INVALID_AMOUNT, ErrorMessage.INVALID_AMOUNT)

    if sender_id == recipient_id:
        raise bad_request(ErrorCode.SELF_PAYMENT, ErrorMessage.SELF_PAYMENT)

    try:
        locked = (
            db.query(User)
            .filter(User.id.in_([sender_id, recipient_id]))
            .order_by(User.id)
            .with_for_update()
            .populate_existing()
            .all()
        )
        by_id = {u.id: u for u in locked}

        recipient = by_id.get(recipient_id)
        if recipient is None:
            raise not_found(ErrorCode.RECIPIENT_NOT_FOUND, ErrorMessage.RECIPIENT_NOT_FOUND)

        sender = by_id.get(sender_id)
        if sender is None:
            raise not_found(ErrorCode.USER_NOT_FOUND, ErrorMessage.USER_NOT_FOUND)

        if Decimal(sender.balance or 0) < amount:
            raise bad_request(
                ErrorCode.INSUFFICIENT_BALANCE,
                ErrorMessage.INSUFFICIENT_BALANCE,
                details={"balance": float(sender.balance or 0), "amount": float(amount)},
            )

        sender.balance = Decimal(sender.balance or 0) - amount
        recipient.balance = Decimal(recipient.balance or 0) + amount

        txn = Transaction(
            reference=new_reference(),
            sender_id=sender.id,
            recipient_id=recipient.id,
            amount=amount,
            type=txn_type,
            status="COMPLETED",
        )
        db.add(txn)
        db.commit()
    except AppException:
        db.rollback()
        raise

    db.refresh(txn)
    logger.info(
        "%s %s: %s -> %s amount=%s",
        txn_type, txn.reference, sender_id, recipient_id, amount,
    )
    return txn


def deposit(db: Session, user_id: str, amount, reference: str) -> Transaction:
    amount = _money(amount)
    if amount <= 0:
        raise bad_request(ErrorCode.INVALID_AMOUNT, ErrorMessage.INVALID_AMOUNT)

    if db.query(Transaction).filter_by(reference=reference).first():
        raise conflict(ErrorCode.DUPLICATE_REFERENCE, ErrorMessage.DUPLICATE_REFERENCE)

    user = (
        db.query(User)
        .filter(User.id == user_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not user:
        db.rollback()
        raise not_found(ErrorCode.USER_NOT_FOUND, ErrorMessage.USER_NOT_FOUND)

    user.balance = Decimal(user.balance or 0) + amount

    txn = Transaction(
        reference=reference,
        sender_id=None,
        recipient_id=user.id,
        amount=amount,
        type="DEPOSIT",
        status="COMPLETED",
    )
    db.add(txn)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict(ErrorCode.DUPLICATE_REFERENCE, ErrorMessage.DUPLICATE_REFERENCE)
    db.refresh(txn)

    logger.info("DEPOSIT %s: %s amount=%s", reference, user_id, amount)
    return txn
