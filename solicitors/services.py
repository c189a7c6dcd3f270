# solicitors/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from crm.exceptions import AuthorizationError, NotFoundError
from crm.identity import Identity
from crm.models import Payment, money
from crm.parsing import parse_positive_int
from crm.scoping import LocationScope

from .bonus import calculate_bonus, find_applicable_rule
from .models import BonusCalculation, Solicitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentResult:
    payment: Payment
    bonus_calculated: bool
    calculation: Optional[BonusCalculation] = None


@dataclass(frozen=True)
class PayoutSummary:
    count: int
    total: Decimal


# -------------------------------------------------------------
#  LOOKUPS (scope aware)
# -------------------------------------------------------------
def _visible_solicitor(scope: LocationScope, solicitor_id: int) -> Solicitor:
    solicitor = scope.apply(Solicitor.objects.all()).filter(pk=solicitor_id).first()
    if solicitor is None:
        if scope.is_restricted:
            raise AuthorizationError("Solicitor not found or access denied")
        raise NotFoundError("Solicitor not found")
    return solicitor


def _locked_payment(scope: LocationScope, payment_id) -> Payment:
    payment = (
        scope.apply(Payment.objects.select_for_update(of=("self",)))
        .filter(pk=payment_id)
        .first()
    )
    if payment is None:
        if scope.is_restricted:
            raise AuthorizationError("Payment not found or access denied")
        raise NotFoundError("Payment not found")
    return payment


# -------------------------------------------------------------
#  ASSIGN
# -------------------------------------------------------------
def assign_payment(identity: Identity, payment_id, solicitor_id) -> AssignmentResult:
    """
    Attach a solicitor to a payment and record the bonus it earns.

    The payment update and the bonus calculation row are written in one
    transaction; a failure anywhere leaves the payment untouched.
    """
    scope = LocationScope.for_identity(identity)
    solicitor_id = parse_positive_int(solicitor_id, "solicitorId")

    with transaction.atomic():
        solicitor = _visible_solicitor(scope, solicitor_id)
        payment = _locked_payment(scope, payment_id)

        # bonus matching needs the pledge (and its category)
        if payment.pledge_id is None:
            raise NotFoundError("Payment not found")

        amount = payment.usd_amount
        rule = find_applicable_rule(solicitor.pk, amount, payment.payment_date, payment.is_donation)
        result = calculate_bonus(amount, rule)

        # one calculation per payment: reassignment replaces the old one
        BonusCalculation.objects.filter(payment=payment).delete()

        payment.solicitor = solicitor
        payment.bonus_percentage = result.percentage
        payment.bonus_amount = result.amount
        payment.bonus_rule = result.rule
        payment.save(update_fields=[
            "solicitor", "bonus_percentage", "bonus_amount", "bonus_rule", "updated_at",
        ])

        calculation = None
        if result.is_positive:
            calculation = BonusCalculation.objects.create(
                payment=payment,
                solicitor=solicitor,
                bonus_rule=result.rule,
                payment_amount=amount,
                bonus_percentage=result.percentage,
                bonus_amount=result.amount,
                calculated_at=timezone.now(),
                is_paid=False,
                notes=f"Auto-calculated on assignment using rule: {result.rule.rule_name}",
            )

    logger.info(
        "Payment %s assigned to solicitor %s by %s (rule=%s, bonus=%s)",
        payment.pk, solicitor.pk, identity.email, result.rule_id, result.amount,
    )
    return AssignmentResult(payment=payment, bonus_calculated=result.is_positive, calculation=calculation)


# -------------------------------------------------------------
#  UNASSIGN
# -------------------------------------------------------------
def unassign_payment(identity: Identity, payment_id) -> Payment:
    """Detach the solicitor and drop the payment's bonus calculation. Safe to repeat."""
    scope = LocationScope.for_identity(identity)

    with transaction.atomic():
        payment = _locked_payment(scope, payment_id)

        deleted, _ = BonusCalculation.objects.filter(payment=payment).delete()

        payment.solicitor = None
        payment.bonus_percentage = None
        payment.bonus_amount = None
        payment.bonus_rule = None
        payment.save(update_fields=[
            "solicitor", "bonus_percentage", "bonus_amount", "bonus_rule", "updated_at",
        ])

    logger.info(
        "Payment %s unassigned by %s (%s bonus calculation(s) removed)",
        payment.pk, identity.email, deleted,
    )
    return payment


# -------------------------------------------------------------
#  PAYOUT
# -------------------------------------------------------------
def mark_calculation_paid(identity: Identity, calculation_id) -> BonusCalculation:
    scope = LocationScope.for_identity(identity)

    with transaction.atomic():
        calculation = (
            scope.apply(BonusCalculation.objects.select_for_update(of=("self",)))
            .filter(pk=calculation_id)
            .first()
        )
        if calculation is None:
            raise NotFoundError("Bonus calculation not found")

        if not calculation.is_paid:
            calculation.mark_paid()
            logger.info("Bonus calculation %s marked paid by %s", calculation.pk, identity.email)

    return calculation


def payout_bonuses(scope: LocationScope, solicitor_id=None, calculated_before=None) -> PayoutSummary:
    """
    Mark every unpaid bonus calculation in scope as paid.

    Optional filters narrow the run to one solicitor and/or to calculations
    made before a cut-off datetime.
    """
    with transaction.atomic():
        pending = scope.apply(BonusCalculation.objects.filter(is_paid=False))
        if solicitor_id is not None:
            pending = pending.filter(solicitor_id=solicitor_id)
        if calculated_before is not None:
            pending = pending.filter(calculated_at__lt=calculated_before)

        ids = list(pending.select_for_update(of=("self",)).values_list("pk", flat=True))
        batch = BonusCalculation.objects.filter(pk__in=ids)
        total = money(batch.aggregate(total=Sum("bonus_amount"))["total"])
        count = batch.update(is_paid=True, paid_at=timezone.now())

    logger.info("Bonus payout: %s calculation(s) marked paid, total %s", count, total)
    return PayoutSummary(count=count, total=total)
