"""Customer Directory: maps an account to its customer profile."""

import logging

from django.db import IntegrityError, transaction

from apps.accounts.models import User
from apps.common.errors import Conflict, NotFound

from .models import Customer

logger = logging.getLogger(__name__)


class CustomerDirectory:
    def get_customer_by_account(self, account_id: int) -> Customer:
        """Return the customer owned by ``account_id``.

        Raises:
            NotFound: If the account has no customer profile.
        """
        customer = Customer.objects.select_related("user").filter(user_id=account_id).first()
        if customer is None:
            raise NotFound(f"Customer not found for user ID {account_id}")
        return customer

    def register_customer(self, account_id: int, name: str, contact_name: str, country: str) -> Customer:
        """Create the customer profile of a customer account.

        Args:
            account_id: Owning account; must exist and have the customer role.
            name: Display name.
            contact_name: Person to contact for deliveries.
            country: Country of the customer.

        Returns:
            Customer: The new profile.

        Raises:
            NotFound: If the account does not exist.
            Conflict: If the account is an admin or already owns a customer.
        """
        user = User.objects.filter(pk=account_id).first()
        if user is None:
            raise NotFound(f"User with ID {account_id} not found")
        if user.is_admin:
            raise Conflict("Admin accounts cannot own a customer profile")
        if Customer.objects.filter(user_id=account_id).exists():
            raise Conflict("Account already has a customer profile")
        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    user=user, name=name, contact_name=contact_name, country=country
                )
        except IntegrityError as e:
            raise Conflict("Account already has a customer profile") from e
        logger.info("customer registered", extra={"account_id": account_id, "customer_id": customer.pk})
        return customer
