from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from novelverse.schemas.user import User


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("username")
    @classmethod
    def username_must_not_be_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Username cannot be empty")
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(Token):
    user: User


class TokenData(BaseModel):
    user_id: Optional[str] = None
