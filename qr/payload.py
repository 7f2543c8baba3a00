"""Payment QR payloads.

A payment QR code carries a small JSON object naming the receiving phone
number, e.g. ``{"type": "weoo_payment", "phone": "9876543210"}``.
"""
import io
import json

import qrcode

PAYLOAD_TYPE = "weoo_payment"


class InvalidQRPayload(ValueError):
    pass


def build_payload(phone: str) -> dict:
    return {"type": PAYLOAD_TYPE, "phone": phone}


def encode_payload(phone: str) -> str:
    return json.dumps(build_payload(phone))


def parse_payload(text: str) -> str:
    """Return the phone number from decoded QR text, or raise InvalidQRPayload."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        raise InvalidQRPayload("Unable to read QR code data.")

    if not isinstance(data, dict) or data.get("type") != PAYLOAD_TYPE:
        raise InvalidQRPayload("This is not a valid WeooWallet payment QR code.")

    phone = data.get("phone")
    if not isinstance(phone, str) or not phone.strip():
        raise InvalidQRPayload("This is not a valid WeooWallet payment QR code.")

    return phone.strip()


def render_png(phone: str) -> bytes:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=2,
    )
    qr.add_data(encode_payload(phone))
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()
