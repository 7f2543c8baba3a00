import logging
import secrets

from fastapi import APIRouter, Depends, Request

from core.auth import get_current_user
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, forbidden
from core.models import User
from core.storage import UserStorage, get_storage
from api_settings.schemas import ToggleApiSchema
from payments.gateway import build_payment_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["Settings"])

TOKEN_PREFIX = "ww_"


def generate_api_token() -> str:
    return TOKEN_PREFIX + secrets.token_urlsafe(32)


def _origin(request: Request) -> str:
    return settings.PUBLIC_BASE_URL or str(request.base_url)


def api_settings_payload(user: User, request: Request) -> dict:
    token = user.api_token
    return {
        "enabled": bool(user.api_enabled),
        "token": token,
        "endpoint": build_payment_url(_origin(request), token) if token else None,
    }


@router.get("/api")
def get_api_settings(request: Request, current_user: User = Depends(get_current_user)):
    return api_settings_payload(current_user, request)


@router.post("/toggle-api")
def toggle_api(
    request: Request,
    data: ToggleApiSchema,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    storage.update_user_api_enabled(current_user.id, data.enabled)
    logger.info("user %s api payments enabled=%s", current_user.id, data.enabled)
    return api_settings_payload(storage.get_user(current_user.id), request)


@router.post("/generate-token")
def generate_token(
    request: Request,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    if not current_user.api_enabled:
        raise forbidden(ErrorCode.API_DISABLED, ErrorMessage.API_DISABLED)

    storage.update_user_api_token(current_user.id, generate_api_token())
    logger.info("user %s rotated api token", current_user.id)
    return api_settings_payload(storage.get_user(current_user.id), request)


@router.post("/revoke-token")
def revoke_token(
    request: Request,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    storage.update_user_api_token(current_user.id, None)
    logger.info("user %s revoked api token", current_user.id)
    return api_settings_payload(storage.get_user(current_user.id), request)
