# solicitors/models.py
from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone

from crm.models import money


# ==========================================================
# SOLICITOR
# ==========================================================
class Solicitor(models.Model):
    STATUS = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("suspended", "Suspended"),
    ]

    contact = models.OneToOneField("crm.Contact", on_delete=models.CASCADE, related_name="solicitor")
    solicitor_code = models.CharField(max_length=50, unique=True, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS, default="active", db_index=True)

    # Default rate if no specific bonus rule (informational only)
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    hire_date = models.DateField(null=True, blank=True)
    termination_date = models.DateField(null=True, blank=True)

    location_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        code = self.solicitor_code or f"#{self.pk}"
        return f"{code} - {self.contact}"

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "contactId": self.contact_id,
            "firstName": self.contact.first_name,
            "lastName": self.contact.last_name,
            "solicitorCode": self.solicitor_code,
            "status": self.status,
            "commissionRate": self.commission_rate,
            "hireDate": self.hire_date,
            "terminationDate": self.termination_date,
            "locationId": self.location_id,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# ==========================================================
# BONUS RULE (higher priority wins when several match)
# ==========================================================
class BonusRule(models.Model):
    PAYMENT_TYPES = [
        ("tuition", "Tuition"),
        ("donation", "Donation"),
        ("both", "Both"),
    ]

    solicitor = models.ForeignKey(Solicitor, on_delete=models.CASCADE, related_name="bonus_rules")
    rule_name = models.CharField(max_length=200)
    bonus_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPES, default="both")

    # NULL = unbounded on that side
    min_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    max_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    effective_from = models.DateField()
    effective_to = models.DateField(null=True, blank=True)  # NULL = ongoing
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(default=1)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-priority", "id"]
        indexes = [
            models.Index(fields=["effective_from", "effective_to"], name="bonus_rule_effective_idx"),
            models.Index(fields=["priority"], name="bonus_rule_priority_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.rule_name} ({self.bonus_percentage}% {self.payment_type}, p{self.priority})"

    def covers_type(self, is_donation: bool) -> bool:
        if self.payment_type == "both":
            return True
        if self.payment_type == "donation":
            return is_donation
        return not is_donation

    def matches(self, amount, payment_date, is_donation: bool) -> bool:
        amount = money(amount)
        if not self.is_active:
            return False
        if self.effective_from > payment_date:
            return False
        if self.effective_to is not None and self.effective_to < payment_date:
            return False
        if not self.covers_type(is_donation):
            return False
        if self.min_amount is not None and self.min_amount > amount:
            return False
        if self.max_amount is not None and self.max_amount < amount:
            return False
        return True

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "solicitorId": self.solicitor_id,
            "ruleName": self.rule_name,
            "bonusPercentage": self.bonus_percentage,
            "paymentType": self.payment_type,
            "minAmount": self.min_amount,
            "maxAmount": self.max_amount,
            "effectiveFrom": self.effective_from,
            "effectiveTo": self.effective_to,
            "isActive": self.is_active,
            "priority": self.priority,
            "notes": self.notes,
        }


# ==========================================================
# BONUS CALCULATION (one per payment, deleted on unassign)
# ==========================================================
class BonusCalculation(models.Model):
    payment = models.OneToOneField("crm.Payment", on_delete=models.CASCADE, related_name="bonus_calculation")
    solicitor = models.ForeignKey(Solicitor, on_delete=models.PROTECT, related_name="bonus_calculations")
    bonus_rule = models.ForeignKey(
        BonusRule, on_delete=models.SET_NULL, null=True, blank=True, related_name="calculations"
    )

    payment_amount = models.DecimalField(max_digits=10, decimal_places=2)
    bonus_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    bonus_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    calculated_at = models.DateTimeField(default=timezone.now, db_index=True)
    is_paid = models.BooleanField(default=False, db_index=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-calculated_at", "-id"]

    def __str__(self) -> str:
        return f"Bonus {self.bonus_amount} for payment #{self.payment_id} ({'paid' if self.is_paid else 'unpaid'})"

    def mark_paid(self, when=None):
        self.is_paid = True
        self.paid_at = when or timezone.now()
        self.save(update_fields=["is_paid", "paid_at"])

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "paymentId": self.payment_id,
            "solicitorId": self.solicitor_id,
            "bonusRuleId": self.bonus_rule_id,
            "paymentAmount": self.payment_amount,
            "bonusPercentage": self.bonus_percentage,
            "bonusAmount": self.bonus_amount,
            "calculatedAt": self.calculated_at,
            "isPaid": self.is_paid,
            "paidAt": self.paid_at,
            "notes": self.notes,
        }
