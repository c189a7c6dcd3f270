# solicitors/bonus.py
"""
Bonus rule matching and bonus calculation.

A rule matches a payment when all of these hold:

* it belongs to the solicitor and is active
* ``effective_from <= payment_date`` and ``effective_to`` is open or ``>= payment_date``
* its payment type is ``both``, or ``donation`` for donation payments,
  or ``tuition`` for everything else
* ``min_amount`` / ``max_amount`` are open or bound the amount

Among matches the highest ``priority`` wins; equal priorities fall back to
the lowest rule id so the choice is repeatable.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from django.db.models import Q

from crm.models import money

from .models import BonusRule

ZERO = Decimal("0.00")
RULE_ORDERING = ("-priority", "id")


def _payment_types_for(is_donation: bool):
    return ["both", "donation"] if is_donation else ["both", "tuition"]


def applicable_rules(solicitor_id, amount, payment_date, is_donation: bool):
    """Queryset of every rule matching the payment, best first."""
    amount = money(amount)
    return (
        BonusRule.objects.filter(
            solicitor_id=solicitor_id,
            is_active=True,
            effective_from__lte=payment_date,
            payment_type__in=_payment_types_for(is_donation),
        )
        .filter(Q(effective_to__isnull=True) | Q(effective_to__gte=payment_date))
        .filter(Q(min_amount__isnull=True) | Q(min_amount__lte=amount))
        .filter(Q(max_amount__isnull=True) | Q(max_amount__gte=amount))
        .order_by(*RULE_ORDERING)
    )


def find_applicable_rule(solicitor_id, amount, payment_date, is_donation: bool) -> Optional[BonusRule]:
    return applicable_rules(solicitor_id, amount, payment_date, is_donation).first()


def select_rule(rules: Iterable[BonusRule], amount, payment_date, is_donation: bool) -> Optional[BonusRule]:
    """In-memory counterpart of ``find_applicable_rule`` (same predicate, same ordering)."""
    candidates = [r for r in rules if r.matches(amount, payment_date, is_donation)]
    if not candidates:
        return None
    candidates.sort(key=lambda r: (-r.priority, r.pk or 0))
    return candidates[0]


# -------------------------------------------------------------
#  CALCULATION
# -------------------------------------------------------------
@dataclass(frozen=True)
class BonusResult:
    percentage: Decimal
    amount: Decimal
    rule: Optional[BonusRule] = None

    @property
    def is_positive(self) -> bool:
        return self.amount > ZERO

    @property
    def rule_id(self):
        return self.rule.pk if self.rule is not None else None


def compute_bonus_amount(amount, percentage) -> Decimal:
    raw = money(amount) * Decimal(percentage or 0) / Decimal("100")
    return raw.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_bonus(amount, rule: Optional[BonusRule]) -> BonusResult:
    if rule is None:
        return BonusResult(percentage=ZERO, amount=ZERO)
    percentage = money(rule.bonus_percentage)
    bonus = compute_bonus_amount(amount, percentage)
    if bonus <= ZERO:
        # nothing earned: payment keeps the zero state, no rule recorded
        return BonusResult(percentage=ZERO, amount=ZERO)
    return BonusResult(percentage=percentage, amount=bonus, rule=rule)
