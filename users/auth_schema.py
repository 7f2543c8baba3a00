import re

from pydantic import BaseModel, Field, model_validator

WWID_PATTERN = re.compile(r"^[a-z0-9]{3,20}$")


def is_valid_wwid(value: str) -> bool:
    return bool(WWID_PATTERN.fullmatch(value or ""))


class RegisterSchema(BaseModel):
    username: str = Field(pattern=r"^[A-Za-z0-9_]{3,30}$")
    phone: str = Field(pattern=r"^\+?[0-9]{7,15}$")
    password: str = Field(min_length=6, max_length=72)

class LoginSchema(BaseModel):
    usernameOrPhone: str = Field(min_length=1)
    password: str = Field(min_length=1)

class WWIDSchema(BaseModel):
    wwid: str = Field(pattern=WWID_PATTERN.pattern)

class SpinSetupSchema(BaseModel):
    spin: str = Field(pattern=r"^[0-9]{4}$")
    confirmSpin: str
    # required when changing an existing S-PIN
    currentSpin: str | None = Field(default=None, pattern=r"^[0-9]{4}$")

    @model_validator(mode="after")
    def spins_match(self):
        if self.spin != self.confirmSpin:
            raise ValueError("S-PINs do not match")
        return self

class SpinVerifySchema(BaseModel):
    spin: str = Field(pattern=r"^[0-9]{4}$")
