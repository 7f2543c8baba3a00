from core.models import User


def user_profile(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "phone": user.phone,
        "wwid": user.wwid,
        "balance": float(user.balance or 0),
        "hasSpin": bool(user.spin),
        "apiEnabled": bool(user.api_enabled),
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


def recipient_summary(user: User) -> dict:
    return {
        "username": user.username,
        "wwid": user.wwid,
        "phone": user.phone,
    }
