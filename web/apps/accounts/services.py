"""Account lifecycle: creation, login, token refresh and logout."""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.common.errors import Conflict, Unauthorized

from .models import AdminProfile, User
from .tokens import REFRESH, decode_token, issue_access_token, issue_refresh_token

logger = logging.getLogger(__name__)


class AccountService:
    """Application service over ``User`` accounts."""

    def create_account(self, *, username: str, email: str, password: str, full_name: str, role: str) -> User:
        """Create an active account with a hashed password.

        Raises:
            Conflict: If the username or email is already taken.
        """
        if User.objects.filter(Q(username=username) | Q(email=email)).exists():
            raise Conflict("Username or email already exists")
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=role,
                )
        except IntegrityError as e:
            # lost a race against a concurrent registration
            raise Conflict("Username or email already exists") from e
        logger.info("account created", extra={"account_id": user.pk, "role": role})
        return user

    @transaction.atomic
    def register_admin(self, *, username: str, email: str, password: str, full_name: str,
                       department: str = "", position: str = "") -> User:
        user = self.create_account(
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            role=User.Role.ADMIN,
        )
        AdminProfile.objects.create(user=user, department=department, position=position)
        return user

    def login(self, username: str, password: str, *, admin_only: bool = False) -> tuple[User, str, str]:
        """Check credentials and issue a token pair.

        The refresh token is stored on the account so it can be revoked by
        ``logout`` and rotated by ``refresh``.

        Args:
            username: Login name.
            password: Plain password.
            admin_only: Reject non-admin accounts (``/admin/login``).

        Returns:
            tuple[User, str, str]: ``(user, access_token, refresh_token)``.

        Raises:
            Unauthorized: On unknown user, wrong password, inactive account, or
                a non-admin account when ``admin_only`` is set.
        """
        user = User.objects.filter(username=username).first()
        if user is None or not user.is_active:
            raise Unauthorized("Invalid credentials")
        if admin_only and not user.is_admin:
            raise Unauthorized("Only admins can log in here")
        if not user.check_password(password):
            raise Unauthorized("Invalid credentials")

        access_token = issue_access_token(user)
        refresh_token = issue_refresh_token(user)
        user.last_login = timezone.now()
        user.refresh_token = refresh_token
        user.save(update_fields=["last_login", "refresh_token", "updated_at"])
        logger.info("login succeeded", extra={"account_id": user.pk})
        return user, access_token, refresh_token

    def refresh(self, refresh_token: str) -> tuple[str, str]:
        """Exchange a stored refresh token for a new token pair."""
        claims = decode_token(refresh_token, REFRESH)
        user = User.objects.filter(pk=int(claims["sub"]), is_active=True).first()
        if user is None or not user.refresh_token or user.refresh_token != refresh_token:
            raise Unauthorized("Refresh token has been revoked")

        access_token = issue_access_token(user)
        rotated = issue_refresh_token(user)
        user.refresh_token = rotated
        user.save(update_fields=["refresh_token", "updated_at"])
        return access_token, rotated

    def logout(self, user: User) -> None:
        user.refresh_token = ""
        user.save(update_fields=["refresh_token", "updated_at"])
