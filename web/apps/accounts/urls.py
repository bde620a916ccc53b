from django.urls import path

from .views import (
    AdminDashboardView,
    AdminLoginView,
    AdminRegisterView,
    LoginView,
    LogoutView,
    ProfileView,
    RefreshView,
)

app_name = "accounts"

urlpatterns = [
    path("auth/login", LoginView.as_view(), name="login"),
    path("auth/refresh", RefreshView.as_view(), name="refresh"),
    path("auth/logout", LogoutView.as_view(), name="logout"),
    path("auth/profile", ProfileView.as_view(), name="profile"),
    path("admin/login", AdminLoginView.as_view(), name="admin-login"),
    path("admin/register", AdminRegisterView.as_view(), name="admin-register"),
    path("admin/dashboard", AdminDashboardView.as_view(), name="admin-dashboard"),
]
