from django.urls import path

from .views import CustomerOrdersReportView, CustomerProfileView, RegisterCustomerView, TopSpendingView

app_name = "customers"

urlpatterns = [
    path("customers/register", RegisterCustomerView.as_view(), name="register"),
    path("customers/profile", CustomerProfileView.as_view(), name="profile"),
    path("customers/top-spending", TopSpendingView.as_view(), name="top-spending"),
    path("customers/orders", CustomerOrdersReportView.as_view(), name="orders-report"),
]
