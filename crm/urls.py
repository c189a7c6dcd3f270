# crm/urls.py
from django.urls import path

from . import views

urlpatterns = [
    # ===================== PAYMENTS / LOCATIONS =====================
    path("payments/", views.payment_list, name="payment_list"),
    path("locations/", views.location_list, name="location_list"),

    # ===================== DASHBOARD =====================
    path("dashboard/trends/", views.dashboard_trends, name="dashboard_trends"),
]
