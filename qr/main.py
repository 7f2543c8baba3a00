from fastapi import APIRouter, Depends, Query, Response

from core.auth import get_current_user
from core.errors import ErrorCode, bad_request
from core.models import User
from core.storage import UserStorage, get_storage
from qr.payload import InvalidQRPayload, build_payload, encode_payload, parse_payload, render_png
from qr.schemas import ParseQRSchema

router = APIRouter(prefix="/api/qr", tags=["QR"])


@router.get("/me")
def my_qr_code(
    download: bool = Query(False),
    current_user: User = Depends(get_current_user),
):
    headers = {}
    if download:
        filename = f"WeooWallet_{current_user.wwid or 'QR'}.png"
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'

    return Response(content=render_png(current_user.phone), media_type="image/png", headers=headers)


@router.get("/me/payload")
def my_qr_payload(current_user: User = Depends(get_current_user)):
    return {
        "payload": build_payload(current_user.phone),
        "data": encode_payload(current_user.phone),
    }


@router.post("/parse")
def parse_qr(
    body: ParseQRSchema,
    current_user: User = Depends(get_current_user),
    storage: UserStorage = Depends(get_storage),
):
    try:
        phone = parse_payload(body.data)
    except InvalidQRPayload as e:
        raise bad_request(ErrorCode.INVALID_QR, str(e))

    recipient = storage.get_user_by_phone(phone)
    return {
        "phone": phone,
        "recipient": {"username": recipient.username, "wwid": recipient.wwid} if recipient else None,
    }
