"""Account Schemas — registration, login and profile payloads for users and shops.

Invariants:
    - Emails validated (EmailStr); text fields non-empty after strip
    - Coordinates bounded to valid WGS84 ranges
    - Password hashes never appear in a response schema
    - Passwords fit bcrypt: at most MAX_PASSWORD_BYTES bytes of UTF-8
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from shopnear.core.passwords import MAX_PASSWORD_BYTES


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("value cannot be empty or whitespace")
    return v


def _fits_bcrypt(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return v


class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("password")
    @classmethod
    def password_fits(cls, v: str) -> str:
        return _fits_bcrypt(v)


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits(cls, v: str) -> str:
        return _fits_bcrypt(v)


class ChangePassword(BaseModel):
    """Accepts camelCase keys (web client) or snake_case."""
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(min_length=1, max_length=72, alias="oldPassword")
    new_password: str = Field(min_length=6, max_length=72, alias="newPassword")

    @field_validator("old_password", "new_password")
    @classmethod
    def passwords_fit(cls, v: str) -> str:
        return _fits_bcrypt(v)


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class ShopRegister(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    owner_name: str = Field(min_length=1, max_length=100)
    type: str = Field(min_length=1, max_length=50)
    email: EmailStr
    mobile: str = Field(min_length=1, max_length=15)
    password: str = Field(min_length=6, max_length=72)
    address: str = Field(min_length=1, max_length=255)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    supports_delivery: bool = False

    @field_validator("name", "owner_name", "type", "mobile", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("password")
    @classmethod
    def password_fits(cls, v: str) -> str:
        return _fits_bcrypt(v)


class ShopStatusUpdate(BaseModel):
    is_open: bool


class ShopProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    owner_name: str
    type: str
    email: str
    mobile: str
    address: str
    latitude: float
    longitude: float
    supports_delivery: bool
    is_open: bool
    subscriber_count: int
