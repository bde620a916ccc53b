"""Pydantic schemas for the account endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginDTO(BaseModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1)


class RefreshDTO(BaseModel):
    refresh_token: str = Field(min_length=1)


class AccountRegisterDTO(CamelModel):
    """Fields shared by customer and admin registration.

    Attributes:
        username: Login name, unique across accounts.
        email: Contact email, unique across accounts. Normalized to lowercase.
        password: Plain password, at least 6 characters.
        full_name: Display name (``fullName`` on the wire).
    """

    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("email must be at most 100 characters")
        return v.lower()


class AdminRegisterDTO(AccountRegisterDTO):
    department: str = Field(default="", max_length=100)
    position: str = Field(default="", max_length=100)


class AccountReadDTO(CamelModel):
    """Account as exposed by the API. Never includes secrets."""

    id: int
    username: str
    email: str
    full_name: str
    role: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


def account_dto(user) -> AccountReadDTO:
    return AccountReadDTO(
        id=user.pk,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        is_active=user.is_active,
        last_login=user.last_login,
        created_at=user.date_joined,
        updated_at=user.updated_at,
    )


def account_body(user) -> dict:
    """Serialize ``user`` for a JSON response."""
    return account_dto(user).model_dump(by_alias=True)
