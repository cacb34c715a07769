"""User schemas for request validation."""

from typing import Literal, Optional

from pydantic import EmailStr, Field, model_validator

from natours.schemas.common import BaseSchema

Role = Literal["user", "guide", "lead-guide", "admin"]


class UserCreate(BaseSchema):
    """Schema for creating a user."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    photo: str = "default.jpg"
    role: Role = "user"
    password: str = Field(..., min_length=8, max_length=128)
    password_confirm: str

    @model_validator(mode="after")
    def check_passwords_match(self) -> "UserCreate":
        if self.password != self.password_confirm:
            raise ValueError("Passwords are not the same!")
        return self


class UserUpdate(BaseSchema):
    """Schema for updating a user; passwords are not changed here."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    photo: Optional[str] = None
    role: Optional[Role] = None
    active: Optional[bool] = None
