# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the user endpoints."""

from typing import Annotated, Optional

from passlib.utils import MAX_PASSWORD_SIZE
from pydantic import BaseModel, Field, StringConstraints


# -- Requests --------------------------------------------------------------
# Blank strings are rejected here (400) so the service never sees a blank
# required field.  Secrets are capped at passlib's hashing limit.

Secret = Annotated[str, StringConstraints(max_length=MAX_PASSWORD_SIZE)]


class RegisterRequest(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    email: str = Field(min_length=3, max_length=255)
    phone: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32)]
    password: Annotated[str, StringConstraints(min_length=1, max_length=MAX_PASSWORD_SIZE)]


class LoginRequest(BaseModel):
    email: str
    password: Secret
    # Optional on purpose: omitted or empty means "skip the passphrase check"
    passphrase: Optional[Secret] = None


# -- Responses -------------------------------------------------------------
# The frontend addresses users by ``_id``; pydantic treats leading-underscore
# attribute names as private, hence the alias.


class UserSummary(BaseModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    phone: Optional[str] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(id=str(user.id), name=user.name, email=user.email, phone=user.phone)


class RegisteredUser(UserSummary):
    passphrase: str
    token: str


class AuthenticatedUser(UserSummary):
    token: str


class RegisterResponse(BaseModel):
    status: str = "success"
    message: str = "Account created successfully"
    data: RegisteredUser


class LoginResponse(BaseModel):
    status: str = "success"
    data: AuthenticatedUser


class ProfileResponse(BaseModel):
    status: str = "success"
    data: UserSummary
