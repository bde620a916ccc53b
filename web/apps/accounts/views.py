"""HTTP views for authentication and the admin back office.

Views validate the body with a pydantic DTO, delegate to ``AccountService``
and shape the response. Errors raised by the service propagate to the DRF
exception handler configured in ``gateway.exceptions``.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.catalog.models import Product
from apps.common.validation import parse
from apps.customers.models import Customer
from apps.orders.models import OrderModel

from .models import User
from .permissions import IsAdminRole
from .schemas import AdminRegisterDTO, LoginDTO, RefreshDTO, account_body
from .services import AccountService


class LoginView(APIView):
    """Exchange username and password for an access/refresh token pair."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"
    admin_only = False

    def post(self, request):
        dto = parse(LoginDTO, request.data)
        user, access_token, refresh_token = AccountService().login(
            dto.username, dto.password, admin_only=self.admin_only
        )
        return Response(
            {"user": account_body(user), "access_token": access_token, "refresh_token": refresh_token},
            status=status.HTTP_200_OK,
        )


class AdminLoginView(LoginView):
    admin_only = True


class RefreshView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    def post(self, request):
        dto = parse(RefreshDTO, request.data)
        access_token, refresh_token = AccountService().refresh(dto.refresh_token)
        return Response({"access_token": access_token, "refresh_token": refresh_token})


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        AccountService().logout(request.user)
        return Response({"message": "Logout successful"})


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(account_body(request.user))


class AdminRegisterView(APIView):
    """Create another admin account. Only admins may call it."""

    permission_classes = [IsAdminRole]

    def post(self, request):
        dto = parse(AdminRegisterDTO, request.data)
        user = AccountService().register_admin(
            username=dto.username,
            email=dto.email,
            password=dto.password,
            full_name=dto.full_name,
            department=dto.department,
            position=dto.position,
        )
        return Response(
            {"message": "Admin registered successfully", "user": account_body(user)},
            status=status.HTTP_201_CREATED,
        )


class AdminDashboardView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        admin_count = User.objects.filter(role=User.Role.ADMIN).count()
        return Response(
            {
                "adminCount": admin_count,
                "message": "Welcome to the admin dashboard",
                "stats": {
                    "totalAdmins": admin_count,
                    "totalCustomers": Customer.objects.count(),
                    "totalProducts": Product.objects.count(),
                    "totalOrders": OrderModel.objects.count(),
                },
            }
        )
