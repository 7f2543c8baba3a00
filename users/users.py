from fastapi import APIRouter, Depends, Query

from core.auth import get_current_user
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, not_found
from core.models import User
from core.storage import UserStorage, get_storage
from users.schemas import recipient_summary

router = APIRouter(prefix="/api/users", tags=["Users"])


#get balance

@router.get("/balance")
def get_balance(current_user: User = Depends(get_current_user)):
    return {
        "balance": float(current_user.balance or 0),
        "currency": settings.CURRENCY,
    }


#recipient preview before paying

@router.get("/lookup")
def lookup_by_phone(
    phone: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    user = storage.get_user_by_phone(phone)
    if not user:
        raise not_found(ErrorCode.USER_NOT_FOUND, ErrorMessage.USER_NOT_FOUND)

    return recipient_summary(user)
