import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import IntegrityError

from core.auth import create_token, ensure_spin, get_current_user, hash_secret, verify_secret
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, bad_request, conflict, unauthorized
from core.models import User
from core.rate_limit import limiter
from core.storage import UserStorage, get_storage
from users.auth_schema import (
    LoginSchema,
    RegisterSchema,
    SpinSetupSchema,
    SpinVerifySchema,
    WWIDSchema,
    is_valid_wwid,
)
from users.schemas import user_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, data: RegisterSchema, storage: UserStorage = Depends(get_storage)):
    # usernames and phones share one login namespace
    if (
        storage.get_user_by_username_or_phone(data.username)
        or storage.get_user_by_username_or_phone(data.phone)
    ):
        raise conflict(ErrorCode.USER_EXISTS, ErrorMessage.USER_EXISTS)

    try:
        user = storage.create_user(
            username=data.username,
            phone=data.phone,
            password=hash_secret(data.password),
        )
    except IntegrityError:
        # lost a race with a concurrent registration
        storage.db.rollback()
        raise conflict(ErrorCode.USER_EXISTS, ErrorMessage.USER_EXISTS)

    logger.info("registered user %s (%s)", user.id, user.username)

    token = create_token({"id": user.id, "username": user.username})
    return {"token": token, "user": user_profile(user)}


@router.post("/login")
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, data: LoginSchema, storage: UserStorage = Depends(get_storage)):

    user = storage.get_user_by_username_or_phone(data.usernameOrPhone)
    if not user or not verify_secret(data.password, user.password):
        raise unauthorized(ErrorMessage.INVALID_CREDENTIALS, ErrorCode.AUTH_INVALID_CREDENTIALS)

    logger.info("user %s logged in", user.id)

    token = create_token({"id": user.id, "username": user.username})
    return {"token": token, "user": user_profile(user), "hasSpin": bool(user.spin)}


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return user_profile(current_user)


@router.get("/wwid/available")
def wwid_available(
    wwid: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    if not is_valid_wwid(wwid):
        return {"wwid": wwid, "valid": False, "available": False}

    owner = storage.get_user_by_wwid(wwid)
    return {
        "wwid": wwid,
        "valid": True,
        "available": owner is None or owner.id == current_user.id,
    }


@router.post("/wwid")
def set_wwid(
    data: WWIDSchema,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    if current_user.wwid == data.wwid:
        return user_profile(current_user)

    owner = storage.get_user_by_wwid(data.wwid)
    if owner and owner.id != current_user.id:
        raise conflict(ErrorCode.WWID_TAKEN, ErrorMessage.WWID_TAKEN)

    try:
        storage.update_user_wwid(current_user.id, data.wwid)
    except IntegrityError:
        storage.db.rollback()
        raise conflict(ErrorCode.WWID_TAKEN, ErrorMessage.WWID_TAKEN)

    logger.info("user %s set wwid %s", current_user.id, data.wwid)
    return user_profile(storage.get_user(current_user.id))


@router.post("/spin")
@limiter.limit(settings.AUTH_RATE_LIMIT)
def set_spin(
    request: Request,
    data: SpinSetupSchema,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    if current_user.spin:
        if not data.currentSpin:
            raise bad_request(ErrorCode.CURRENT_SPIN_REQUIRED, ErrorMessage.CURRENT_SPIN_REQUIRED)
        ensure_spin(current_user, data.currentSpin)

    storage.update_user_spin(current_user.id, hash_secret(data.spin))
    logger.info("user %s updated S-PIN", current_user.id)
    return {"success": True, "hasSpin": True}


@router.post("/verify-pin")
@limiter.limit(settings.AUTH_RATE_LIMIT)
def verify_pin(
    request: Request,
    data: SpinVerifySchema,
    current_user: User = Depends(get_current_user),
):
    ensure_spin(current_user, data.spin)
    return {"verified": True}
