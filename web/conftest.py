"""Shared pytest fixtures: fast hashing, clean throttle counters, factories."""

import itertools
from decimal import Decimal

import pytest
from django.core.cache import cache

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture(autouse=True)
def reset_throttle_cache():
    # throttle history lives in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_product(db):
    from apps.catalog.models import Product

    def _make(name=None, unit_price="10.00", quantity=5, product_code=None):
        n = next(_seq)
        return Product.objects.create(
            name=name or f"Product {n}",
            unit_price=Decimal(unit_price),
            quantity=quantity,
            product_code=product_code,
        )

    return _make


@pytest.fixture
def make_customer(db):
    """Create a customer account with its profile; returns the ``Customer``."""
    from apps.accounts.models import User
    from apps.customers.models import Customer

    def _make(username=None, password="secret123", name=None, country="Vietnam"):
        n = next(_seq)
        username = username or f"customer{n}"
        user = User.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password=password,
            full_name=name or f"Customer {n}",
            role=User.Role.CUSTOMER,
        )
        return Customer.objects.create(
            user=user, name=user.full_name, contact_name=user.full_name, country=country
        )

    return _make


@pytest.fixture
def make_admin(db):
    from apps.accounts.models import AdminProfile, User

    def _make(username=None, password="secret123"):
        n = next(_seq)
        username = username or f"admin{n}"
        user = User.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password=password,
            full_name=f"Admin {n}",
            role=User.Role.ADMIN,
        )
        AdminProfile.objects.create(user=user, department="Ops", position="Lead")
        return user

    return _make


@pytest.fixture
def auth_headers():
    """Build the ``Authorization`` header kwargs for the Django test client."""
    from apps.accounts.tokens import issue_access_token

    def _headers(user) -> dict:
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_access_token(user)}"}

    return _headers
