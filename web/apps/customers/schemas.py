"""Pydantic schemas for the customer endpoints."""

from datetime import datetime

from pydantic import Field

from apps.accounts.schemas import AccountReadDTO, AccountRegisterDTO, CamelModel, account_dto


class CustomerRegisterDTO(AccountRegisterDTO):
    """Sign-up payload: account fields plus the customer profile.

    ``contactName`` is optional and falls back to ``fullName``.
    """

    country: str = Field(min_length=1, max_length=100)
    contact_name: str | None = Field(default=None, max_length=100)


class CustomerReadDTO(CamelModel):
    id: int
    name: str
    contact_name: str
    country: str
    created_at: datetime
    updated_at: datetime
    user: AccountReadDTO


def customer_body(customer) -> dict:
    dto = CustomerReadDTO(
        id=customer.pk,
        name=customer.name,
        contact_name=customer.contact_name,
        country=customer.country,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
        user=account_dto(customer.user),
    )
    return dto.model_dump(by_alias=True)
