# crm/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Category, Contact, Payment, Pledge, User


# ==========================================================
# USER ADMIN (role + location)
# ==========================================================
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "role", "location_id", "is_active", "is_staff")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("username", "email", "location_id")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("CRM access", {"fields": ("role", "location_id")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("CRM access", {"fields": ("email", "role", "location_id")}),
    )


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "email", "phone", "location_id", "created_at")
    search_fields = ("first_name", "last_name", "email", "phone")
    list_filter = ("location_id",)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    search_fields = ("name",)
    list_filter = ("is_active",)


@admin.register(Pledge)
class PledgeAdmin(admin.ModelAdmin):
    list_display = ["id", "contact", "category", "pledge_date", "original_amount", "currency", "balance", "is_active"]
    list_filter = ["currency", "is_active", "category"]
    search_fields = ["contact__first_name", "contact__last_name", "campaign_code"]


# ==========================================================
# PAYMENT ADMIN (bonus fields are maintained by the assignment service)
# ==========================================================
@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = [
        "id", "pledge", "amount", "currency", "amount_usd", "payment_date",
        "payment_status", "solicitor", "bonus_amount",
    ]
    list_filter = ["payment_status", "payment_method", "currency"]
    search_fields = ["reference_number", "pledge__contact__first_name", "pledge__contact__last_name"]
    readonly_fields = ["solicitor", "bonus_percentage", "bonus_amount", "bonus_rule", "created_at", "updated_at"]
