# solicitors/urls.py
from django.urls import path

from . import views

urlpatterns = [
    # ===================== SOLICITOR-PAYMENT ASSIGNMENT =====================
    path("solicitor-payments/<int:payment_id>/assign/", views.assign_solicitor_payment, name="assign_solicitor_payment"),
    path("solicitor-payments/<int:payment_id>/unassign/", views.unassign_solicitor_payment, name="unassign_solicitor_payment"),

    # ===================== SOLICITORS / BONUS RULES =====================
    path("solicitor/", views.solicitor_collection, name="solicitor_collection"),
    path("solicitor/<int:solicitor_id>/", views.solicitor_detail, name="solicitor_detail"),
    path("solicitor/<int:solicitor_id>/bonus-rules/", views.bonus_rule_collection, name="bonus_rule_collection"),

    # ===================== BONUS CALCULATIONS =====================
    path("bonus-calculations/", views.bonus_calculation_list, name="bonus_calculation_list"),
    path("bonus-calculations/<int:calculation_id>/mark-paid/", views.bonus_calculation_mark_paid, name="bonus_calculation_mark_paid"),

    # ===================== DASHBOARD =====================
    path("dashboard/stats/", views.dashboard_stats_view, name="dashboard_stats"),
    path("dashboard/top-performers/", views.top_performers_view, name="dashboard_top_performers"),
]
