import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.database import get_db
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, bad_request, forbidden, not_found, unauthorized
from core.rate_limit import limiter
from core.storage import UserStorage, get_storage
from transactions.service import transfer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Payments"])

PAYMENT_TYPE_WALLET = "wallet"


def build_payment_url(origin: str, token: str, wwid: str = "{recipient_wwid}", amount: str = "{amount}") -> str:
    """Payment-API url handed to merchants; placeholders are left for them to fill."""
    origin = str(origin).rstrip("/")
    return f"{origin}/api/payment?type={PAYMENT_TYPE_WALLET}&token={token}&wwid={wwid}&amount={amount}"


@router.post("/payment")
@limiter.limit(settings.PAYMENT_RATE_LIMIT)
def api_payment(
    request: Request,
    type: str = Query(...),
    token: str = Query(..., min_length=1),
    wwid: str = Query(..., min_length=1),
    amount: Decimal = Query(..., gt=0, max_digits=12, decimal_places=2),
    db: Session = Depends(get_db),
    storage: UserStorage = Depends(get_storage),
):
    if type != PAYMENT_TYPE_WALLET:
        raise bad_request(
            ErrorCode.UNSUPPORTED_PAYMENT_TYPE,
            ErrorMessage.UNSUPPORTED_PAYMENT_TYPE,
            details={"type": type},
        )

    payer = storage.get_user_by_api_token(token)
    if not payer:
        raise unauthorized(ErrorMessage.INVALID_API_TOKEN, ErrorCode.INVALID_API_TOKEN)

    if not payer.api_enabled:
        raise forbidden(ErrorCode.API_DISABLED, ErrorMessage.API_DISABLED)

    recipient = storage.get_user_by_wwid(wwid.strip().lower())
    if not recipient:
        raise not_found(ErrorCode.RECIPIENT_NOT_FOUND, ErrorMessage.RECIPIENT_NOT_FOUND)

    txn = transfer(db, payer.id, recipient.id, amount, "API_PAYMENT")
    logger.info("api payment %s by %s", txn.reference, payer.id)

    return {
        "success": True,
        "data": {
            "transactionId": str(txn.id),
            "reference": txn.reference,
            "amount": float(txn.amount),
            "recipientWwid": recipient.wwid,
            "status": txn.status,
            "createdAt": txn.created_at.isoformat(),
        },
    }
