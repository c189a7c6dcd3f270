# solicitors/admin.py
from django.contrib import admin, messages
from django.db import transaction
from django.utils import timezone

from .models import BonusCalculation, BonusRule, Solicitor


class BonusRuleInline(admin.TabularInline):
    model = BonusRule
    extra = 0


@admin.register(Solicitor)
class SolicitorAdmin(admin.ModelAdmin):
    list_display = ("id", "solicitor_code", "contact", "status", "location_id", "commission_rate", "hire_date")
    search_fields = ("solicitor_code", "contact__first_name", "contact__last_name")
    list_filter = ("status", "location_id")
    inlines = [BonusRuleInline]


@admin.register(BonusRule)
class BonusRuleAdmin(admin.ModelAdmin):
    list_display = (
        "rule_name", "solicitor", "bonus_percentage", "payment_type", "min_amount", "max_amount",
        "effective_from", "effective_to", "priority", "is_active",
    )
    list_filter = ("payment_type", "is_active")
    search_fields = ("rule_name", "solicitor__solicitor_code")


@admin.register(BonusCalculation)
class BonusCalculationAdmin(admin.ModelAdmin):
    list_display = (
        "id", "payment", "solicitor", "bonus_rule", "payment_amount",
        "bonus_percentage", "bonus_amount", "calculated_at", "is_paid", "paid_at",
    )
    list_filter = ("is_paid",)
    search_fields = ("solicitor__solicitor_code", "notes")
    readonly_fields = (
        "payment", "solicitor", "bonus_rule", "payment_amount",
        "bonus_percentage", "bonus_amount", "calculated_at",
    )
    actions = ["mark_selected_paid"]

    @admin.action(description="Mark selected bonuses as paid")
    def mark_selected_paid(self, request, queryset):
        with transaction.atomic():
            updated = queryset.filter(is_paid=False).update(is_paid=True, paid_at=timezone.now())
        self.message_user(request, f"{updated} bonus calculation(s) marked paid.", messages.SUCCESS)
