from fastapi import status
from core.exceptions import AppException


class ErrorCode:
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_UNAUTHORIZED = "AUTH_UNAUTHORIZED"

    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_EXISTS = "USER_EXISTS"

    WWID_TAKEN = "WWID_TAKEN"

    SPIN_NOT_SET = "SPIN_NOT_SET"
    INVALID_SPIN = "INVALID_SPIN"
    CURRENT_SPIN_REQUIRED = "CURRENT_SPIN_REQUIRED"

    API_DISABLED = "API_DISABLED"
    DEPOSITS_DISABLED = "DEPOSITS_DISABLED"
    INVALID_API_TOKEN = "INVALID_API_TOKEN"
    UNSUPPORTED_PAYMENT_TYPE = "UNSUPPORTED_PAYMENT_TYPE"

    RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
    SELF_PAYMENT = "SELF_PAYMENT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    DUPLICATE_REFERENCE = "DUPLICATE_REFERENCE"

    INVALID_QR = "INVALID_QR"


class ErrorMessage:
    INVALID_CREDENTIALS = "Invalid username, phone or password"
    UNAUTHORIZED = "You are not authorized to perform this action"

    USER_NOT_FOUND = "User not found"
    USER_EXISTS = "Username or phone number is already registered"

    WWID_TAKEN = "This WWID is already taken"

    SPIN_NOT_SET = "Set up your S-PIN first"
    INVALID_SPIN = "Incorrect S-PIN"
    CURRENT_SPIN_REQUIRED = "Enter your current S-PIN to change it"

    API_DISABLED = "API payments are disabled"
    DEPOSITS_DISABLED = "Direct deposits are disabled"
    INVALID_API_TOKEN = "Invalid API token"
    UNSUPPORTED_PAYMENT_TYPE = "Unsupported payment type"

    RECIPIENT_NOT_FOUND = "Recipient not found"
    SELF_PAYMENT = "You cannot pay yourself"
    INVALID_AMOUNT = "Amount must be greater than zero"
    INSUFFICIENT_BALANCE = "Insufficient wallet balance"
    DUPLICATE_REFERENCE = "Duplicate transaction reference"




def bad_request(code: str, message: str, details: dict | None = None):
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=code,
        message=message,
        details=details
    )


def unauthorized(message: str = ErrorMessage.UNAUTHORIZED, code: str = ErrorCode.AUTH_UNAUTHORIZED):
    return AppException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code=code,
        message=message
    )


def forbidden(code: str, message: str):
    return AppException(
        status_code=status.HTTP_403_FORBIDDEN,
        code=code,
        message=message
    )


def not_found(code: str, message: str):
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=code,
        message=message
    )


def conflict(code: str, message: str):
    return AppException(
        status_code=status.HTTP_409_CONFLICT,
        code=code,
        message=message
    )
