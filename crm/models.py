# crm/models.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth.models import AbstractUser
from django.db import models


# -----------------------------
# Helpers
# -----------------------------
def money(v) -> Decimal:
    return Decimal(v or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def is_donation_category(category_name) -> bool:
    return "donation" in (category_name or "").lower()


CURRENCIES = [
    ("USD", "USD"),
    ("ILS", "ILS"),
    ("EUR", "EUR"),
    ("JPY", "JPY"),
    ("GBP", "GBP"),
    ("AUD", "AUD"),
    ("CAD", "CAD"),
    ("ZAR", "ZAR"),
]


# ==========================================================
# USERS (session identity: role + administered location)
# ==========================================================
class User(AbstractUser):
    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"
        SUPER_ADMIN = "super_admin", "Super admin"

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)

    # Admins only see rows belonging to this location
    location_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


# ==========================================================
# CONTACTS / CATEGORIES / PLEDGES
# ==========================================================
class Contact(models.Model):
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")

    # Partition key for location scoping
    location_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Category(models.Model):
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name

    @property
    def is_donation(self) -> bool:
        return is_donation_category(self.name)


class Pledge(models.Model):
    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="pledges")
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="pledges"
    )
    pledge_date = models.DateField()
    description = models.TextField(blank=True, default="")

    original_amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, choices=CURRENCIES, default="USD")
    original_amount_usd = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    exchange_rate = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)

    total_paid = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    balance = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    campaign_code = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-pledge_date", "-id"]

    def __str__(self) -> str:
        return f"Pledge #{self.pk} - {self.contact} {self.original_amount} {self.currency}"


# ==========================================================
# PAYMENTS (solicitor + bonus fields are derived, never client-set)
# ==========================================================
class Payment(models.Model):
    STATUS = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
        ("refunded", "Refunded"),
        ("processing", "Processing"),
    ]
    METHODS = [
        ("ach", "ACH"),
        ("bank_transfer", "Bank transfer"),
        ("cash", "Cash"),
        ("check", "Check"),
        ("credit_card", "Credit card"),
        ("wire", "Wire"),
        ("other", "Other"),
    ]

    pledge = models.ForeignKey(
        Pledge, on_delete=models.SET_NULL, null=True, blank=True, related_name="payments"
    )
    # Third-party payer: a contact paying on behalf of the pledge's contact
    payer_contact = models.ForeignKey(
        Contact, on_delete=models.SET_NULL, null=True, blank=True, related_name="third_party_payments"
    )

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, choices=CURRENCIES, default="USD")
    amount_usd = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    exchange_rate = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)

    payment_date = models.DateField()
    payment_method = models.CharField(max_length=30, choices=METHODS, default="other")
    payment_status = models.CharField(max_length=20, choices=STATUS, default="completed", db_index=True)
    reference_number = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    solicitor = models.ForeignKey(
        "solicitors.Solicitor",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )
    bonus_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    bonus_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    bonus_rule = models.ForeignKey(
        "solicitors.BonusRule",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-payment_date", "-id"]
        indexes = [
            models.Index(fields=["payment_date"], name="payment_payment_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment #{self.pk} - {self.amount} {self.currency} on {self.payment_date}"

    @property
    def usd_amount(self) -> Decimal:
        """Amount used for bonus matching: the USD conversion when recorded."""
        if self.amount_usd is not None:
            return money(self.amount_usd)
        return money(self.amount)

    @property
    def is_donation(self) -> bool:
        category = self.pledge.category if self.pledge_id else None
        return bool(category and category.is_donation)

    @property
    def is_third_party(self) -> bool:
        return self.payer_contact_id is not None

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "pledgeId": self.pledge_id,
            "payerContactId": self.payer_contact_id,
            "isThirdParty": self.is_third_party,
            "amount": self.amount,
            "currency": self.currency,
            "amountUsd": self.amount_usd,
            "paymentDate": self.payment_date,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "referenceNumber": self.reference_number,
            "solicitorId": self.solicitor_id,
            "bonusPercentage": self.bonus_percentage,
            "bonusAmount": self.bonus_amount,
            "bonusRuleId": self.bonus_rule_id,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
