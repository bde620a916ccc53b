from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class AccountManager(UserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        """Superusers are admins of the storefront, with an admin profile."""
        extra_fields.setdefault("role", self.model.Role.ADMIN)
        user = super().create_superuser(username, email, password, **extra_fields)
        AdminProfile.objects.get_or_create(user=user)
        return user


class User(AbstractUser):
    """Login account shared by customers and administrators.

    ``role`` decides which identity hangs off the account: a ``Customer``
    (customers app) or an ``AdminProfile``.
    """

    class Role(models.TextChoices):
        ADMIN = "admin"
        CUSTOMER = "customer"

    email = models.EmailField("email address", max_length=100, unique=True)
    full_name = models.CharField(max_length=100)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.CUSTOMER)
    refresh_token = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    objects = AccountManager()

    class Meta:
        db_table = "users"

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN


class AdminProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="admin_profile")
    department = models.CharField(max_length=100, blank=True, default="")
    position = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "admin"
