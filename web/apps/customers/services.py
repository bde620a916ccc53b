"""Self-service customer sign-up."""

from django.db import transaction

from apps.accounts.models import User
from apps.accounts.services import AccountService
from apps.accounts.tokens import issue_access_token

from .directory import CustomerDirectory
from .schemas import CustomerRegisterDTO


@transaction.atomic
def register_customer_account(dto: CustomerRegisterDTO) -> tuple[User, str]:
    """Create a customer account and its profile in one transaction.

    Returns:
        tuple[User, str]: The new account and an access token for it.

    Raises:
        Conflict: If the username or email is already taken.
    """
    user = AccountService().create_account(
        username=dto.username,
        email=dto.email,
        password=dto.password,
        full_name=dto.full_name,
        role=User.Role.CUSTOMER,
    )
    CustomerDirectory().register_customer(
        user.pk,
        name=dto.full_name,
        contact_name=dto.contact_name or dto.full_name,
        country=dto.country,
    )
    return user, issue_access_token(user)
