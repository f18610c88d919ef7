from typing import Optional

from pydantic import BaseModel, Field

from hotel_reservations.models.enums import UserType


class RegisterPayload(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    password: str = Field(..., description="At least 6 characters")


class LoginPayload(BaseModel):
    email: str
    password: str
    user_type: UserType = Field(UserType.GUEST, description="Identity space to log into")


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_type: UserType


class MeOut(BaseModel):
    id: int
    user_type: UserType
    email: str
    first_name: str
    last_name: str
