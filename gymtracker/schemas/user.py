"""Account, credential and profile schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Identity carried by a verified credential."""

    id: int
    username: str
    email: str


class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=72)
    name: str | None = Field(None, max_length=100)
    height: float | None = Field(None, gt=0, lt=300)
    weight: float | None = Field(None, gt=0, lt=500)


class UserLogin(BaseModel):
    """``username`` accepts either the username or the email address."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    name: str | None = None
    join_date: date


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


class ProfileRead(UserPublic):
    height: float | None = None
    weight: float | None = None


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, max_length=100)
    height: float | None = Field(None, gt=0, lt=300)
    weight: float | None = Field(None, gt=0, lt=500)
