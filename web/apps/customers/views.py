"""Customer sign-up, profile and admin reports."""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdminRole
from apps.accounts.schemas import account_body
from apps.common.validation import parse

from . import reports
from .directory import CustomerDirectory
from .schemas import CustomerRegisterDTO, customer_body
from .services import register_customer_account


class RegisterCustomerView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    def post(self, request):
        dto = parse(CustomerRegisterDTO, request.data)
        user, access_token = register_customer_account(dto)
        return Response(
            {"user": account_body(user), "access_token": access_token},
            status=status.HTTP_201_CREATED,
        )


class CustomerProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        customer = CustomerDirectory().get_customer_by_account(request.user.pk)
        return Response(customer_body(customer))


class TopSpendingView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(
            {
                "success": True,
                "data": reports.top_spending_customers(),
                "message": "Top spending customers retrieved successfully",
            }
        )


class CustomerOrdersReportView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(
            {
                "success": True,
                "data": reports.orders_summary(),
                "message": "Orders retrieved successfully",
            }
        )
