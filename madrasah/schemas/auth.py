"""
Pydantic schemas for authentication and the user's own profile.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from madrasah.schemas.common import bd_phone, blank_to_none


class SignIn(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)


class SignUp(SignIn):
    full_name: str = Field(min_length=2, max_length=100)


class ProfileUpdate(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
    phone: Optional[str] = None

    _phone = field_validator("phone")(bd_phone)

    def to_record(self) -> dict:
        return {"full_name": self.full_name, "phone": blank_to_none(self.phone)}


class CurrentUser(BaseModel):
    user_id: str
    email: Optional[str] = None
    role: str = "user"
    name: Optional[str] = None
