import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from core.database import get_db
from core.env_config import settings
from core.errors import ErrorCode, ErrorMessage, bad_request, forbidden, unauthorized
from core.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def hash_secret(secret: str) -> str:
    return pwd_context.hash(secret)


def verify_secret(secret: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(secret, hashed)


def create_token(data: dict) -> str:

    user_id = str(data.get("id") or "")
    if not user_id:
        raise RuntimeError("create_token() requires data['id']")

    now = datetime.now(timezone.utc)
    payload = {
        **data,
        "id": user_id,
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": True},
        )
    except jwt.ExpiredSignatureError:
        raise unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise unauthorized("Invalid token")

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise unauthorized("Invalid token")

    user = db.query(User).filter(User.id == str(user_id)).first()
    if not user:
        logger.warning("token for unknown user %s", user_id)
        raise unauthorized("User not found")

    return user


def ensure_spin(user: User, spin: str):
    """Raise unless ``spin`` matches the user's stored S-PIN."""
    if not user.spin:
        raise bad_request(ErrorCode.SPIN_NOT_SET, ErrorMessage.SPIN_NOT_SET)
    if not verify_secret(spin, user.spin):
        logger.info("wrong S-PIN for user %s", user.id)
        raise forbidden(ErrorCode.INVALID_SPIN, ErrorMessage.INVALID_SPIN)
