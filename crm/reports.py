# crm/reports.py
import calendar
from datetime import date
from decimal import Decimal

from django.db.models import DecimalField, Sum
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone

from .models import Payment, Pledge, money


def months_ago(anchor: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to the month's last day."""
    month_index = anchor.year * 12 + (anchor.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _month_key(value) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def monthly_trends(scope, months=6, today: date = None) -> dict:
    """Pledged vs. collected (completed payments) USD totals for the last ``months`` months."""
    today = today or timezone.localdate()
    first_month = months_ago(today.replace(day=1), months - 1)
    money_field = DecimalField(max_digits=14, decimal_places=2)

    pledge_rows = (
        scope.apply(Pledge.objects.filter(pledge_date__gte=first_month, pledge_date__lte=today))
        .annotate(month=TruncMonth("pledge_date"))
        .values("month")
        .annotate(total=Sum(Coalesce("original_amount_usd", "original_amount", output_field=money_field)))
        .order_by("month")
    )
    payment_rows = (
        scope.apply(Payment.objects.filter(
            payment_status="completed",
            payment_date__gte=first_month,
            payment_date__lte=today,
        ))
        .annotate(month=TruncMonth("payment_date"))
        .values("month")
        .annotate(total=Sum(Coalesce("amount_usd", "amount", output_field=money_field)))
        .order_by("month")
    )

    pledged = {_month_key(row["month"]): money(row["total"]) for row in pledge_rows}
    collected = {_month_key(row["month"]): money(row["total"]) for row in payment_rows}

    labels, months_out, pledges, payments = [], [], [], []
    for offset in range(months - 1, -1, -1):
        month_start = months_ago(today.replace(day=1), offset)
        key = _month_key(month_start)
        months_out.append(key)
        labels.append(calendar.month_abbr[month_start.month])
        pledges.append(pledged.get(key, Decimal("0.00")))
        payments.append(collected.get(key, Decimal("0.00")))

    return {
        "labels": labels,
        "months": months_out,
        "pledges": pledges,
        "payments": payments,
    }
