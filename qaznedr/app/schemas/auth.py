from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from qaznedr.app.core.security import validate_password_strength


class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = Field(None, min_length=2, max_length=150)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        error = validate_password_strength(v)
        if error:
            raise ValueError(error)
        return v


class UserPublic(BaseModel):
    id: UUID
    email: str
    name: str | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RegisterOut(BaseModel):
    message: str
    user: UserPublic


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class CsrfTokenOut(BaseModel):
    csrf_token: str
