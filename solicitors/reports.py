# solicitors/reports.py
"""Dashboard aggregations over solicitors, payments and bonus calculations."""
from datetime import date
from decimal import Decimal

from django.db.models import Avg, Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from crm.exceptions import ValidationError
from crm.models import Payment, money
from crm.reports import months_ago

from .models import BonusCalculation, Solicitor

PERIOD_MONTHS = {"month": 1, "quarter": 3, "year": 12, "all": None}

MONEY = DecimalField(max_digits=14, decimal_places=2)
ZERO = Value(Decimal("0.00"), output_field=MONEY)


def _sum(expression, **extra):
    return Coalesce(Sum(expression, output_field=MONEY, **extra), ZERO, output_field=MONEY)


def dashboard_stats(scope) -> dict:
    solicitor_rows = (
        scope.apply(Solicitor.objects.all())
        .values("status")
        .annotate(count=Count("id"))
        .order_by("status")
    )
    breakdown = [{"status": row["status"], "count": row["count"]} for row in solicitor_rows]

    usd = Coalesce("amount_usd", "amount", output_field=MONEY)
    assigned = Q(solicitor__isnull=False)
    payment_data = scope.apply(Payment.objects.all()).aggregate(
        assigned=Count("id", filter=assigned),
        unassigned=Count("id", filter=Q(solicitor__isnull=True)),
        total_amount=_sum(usd),
        assigned_amount=_sum(usd, filter=assigned),
    )

    unpaid = Q(is_paid=False)
    bonus_data = scope.apply(BonusCalculation.objects.all()).aggregate(
        total=_sum("bonus_amount"),
        paid=_sum("bonus_amount", filter=Q(is_paid=True)),
        unpaid=_sum("bonus_amount", filter=unpaid),
        total_calculations=Count("id"),
        unpaid_calculations=Count("id", filter=unpaid),
    )

    return {
        "solicitors": {
            "active": sum(row["count"] for row in breakdown if row["status"] == "active"),
            "total": sum(row["count"] for row in breakdown),
            "breakdown": breakdown,
        },
        "payments": {
            "assigned": payment_data["assigned"],
            "unassigned": payment_data["unassigned"],
            "totalAmount": money(payment_data["total_amount"]),
            "assignedAmount": money(payment_data["assigned_amount"]),
        },
        "bonuses": {
            "totalAmount": money(bonus_data["total"]),
            "paidAmount": money(bonus_data["paid"]),
            "unpaidAmount": money(bonus_data["unpaid"]),
            "totalCalculations": bonus_data["total_calculations"],
            "unpaidCalculations": bonus_data["unpaid_calculations"],
        },
    }


def top_performers(scope, limit=10, period="all", today: date = None) -> list:
    if period not in PERIOD_MONTHS:
        raise ValidationError("period must be one of: " + ", ".join(PERIOD_MONTHS), fields=["period"])

    today = today or timezone.localdate()
    in_period = Q(payments__isnull=False)
    if PERIOD_MONTHS[period]:
        in_period &= Q(payments__payment_date__gte=months_ago(today, PERIOD_MONTHS[period]))

    usd = Coalesce("payments__amount_usd", "payments__amount", output_field=MONEY)
    rows = (
        scope.apply(Solicitor.objects.filter(status="active"))
        .select_related("contact")
        .annotate(
            total_raised=_sum(usd, filter=in_period),
            payments_count=Count("payments", filter=in_period),
            total_bonus=_sum("payments__bonus_amount", filter=in_period),
            avg_payment=Avg(usd, filter=in_period, output_field=MONEY),
        )
        .order_by("-total_raised", "id")[:limit]
    )

    return [
        {
            "solicitorId": s.pk,
            "solicitorCode": s.solicitor_code,
            "firstName": s.contact.first_name,
            "lastName": s.contact.last_name,
            "totalRaised": money(s.total_raised),
            "paymentsCount": s.payments_count,
            "totalBonus": money(s.total_bonus),
            "avgPaymentSize": money(s.avg_payment),
        }
        for s in rows
    ]
