# donor_crm/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),            # Django default admin
    path("api/", include("crm.urls")),          # contacts, payments, dashboard
    path("api/", include("solicitors.urls")),   # solicitors, bonus rules, assignment
]
