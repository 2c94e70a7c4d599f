from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignupPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class SignInPayload(BaseModel):
    email: EmailStr
    password: str


class ResendVerificationPayload(BaseModel):
    email: Optional[EmailStr] = None


class SubscriptionPayload(BaseModel):
    subscription: str


class SignupResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    subscription: str
    avatar_url: str = Field(alias="avatarURL")


class SignInResponse(BaseModel):
    token: str
    email: str
    subscription: str


class CurrentUserResponse(BaseModel):
    email: str
    subscription: str


class AvatarResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    avatar_url: str = Field(alias="avatarURL")


class MessageResponse(BaseModel):
    message: str
