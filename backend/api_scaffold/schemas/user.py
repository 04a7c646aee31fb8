"""User Schemas — attribute validation and login payloads.

Invariants:
    - email must be a syntactically valid address
    - name cannot be blank
    - password is at most 72 bytes (bcrypt input limit)
"""

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, field_validator, validate_email,
)
from pydantic_core import PydanticCustomError

_BCRYPT_MAX_BYTES = 72


class UserAttributes(BaseModel):
    """Writable attributes of a User."""
    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"password cannot exceed {_BCRYPT_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Login credentials.

    email is normalized like UserAttributes.email so the lookup matches the
    stored spelling; a malformed address is kept as-is and rejected as 401
    like any unknown one.
    """
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        try:
            _, normalized = validate_email(v)
        except PydanticCustomError:
            return v
        return normalized


class TokenResponse(BaseModel):
    token: str
