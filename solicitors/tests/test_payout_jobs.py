from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from crm.models import User
from crm.tests.helpers import identity_for, make_contact, make_payment, make_pledge
from solicitors.models import BonusCalculation, BonusRule, Solicitor
from solicitors.services import assign_payment
from solicitors.tasks import payout_bonuses_task


class PayoutJobsTest(TestCase):
    def setUp(self):
        super_admin = identity_for(User.Role.SUPER_ADMIN, None)
        self.solicitors = {}
        for location in ("LOC-A", "LOC-B"):
            solicitor = Solicitor.objects.create(contact=make_contact(location), location_id=location)
            BonusRule.objects.create(
                solicitor=solicitor, rule_name="Five", bonus_percentage=Decimal("5"), effective_from=date(2024, 1, 1)
            )
            payment = make_payment(make_pledge(make_contact(location)), amount="200.00")
            assign_payment(super_admin, payment.pk, solicitor.pk)
            self.solicitors[location] = solicitor

        # one calculation from last month, one from today
        last_month = timezone.now().replace(day=1) - timedelta(days=3)
        BonusCalculation.objects.filter(solicitor=self.solicitors["LOC-A"]).update(calculated_at=last_month)

    def test_command_pays_by_location(self):
        out = StringIO()
        call_command("pay_bonuses", "--location", "LOC-B", stdout=out)
        self.assertIn("Paid 1 bonus calculation(s), total 10.00", out.getvalue())
        self.assertTrue(BonusCalculation.objects.get(solicitor=self.solicitors["LOC-B"]).is_paid)
        self.assertFalse(BonusCalculation.objects.get(solicitor=self.solicitors["LOC-A"]).is_paid)

    def test_command_nothing_to_pay(self):
        out = StringIO()
        call_command("pay_bonuses", "--before", "2000-01-01", stdout=out)
        self.assertIn("No unpaid bonus calculations matched", out.getvalue())

    def test_command_rejects_bad_date(self):
        with self.assertRaises(CommandError):
            call_command("pay_bonuses", "--before", "yesterday", stdout=StringIO())

    def test_monthly_task_pays_previous_months_only(self):
        result = payout_bonuses_task()
        self.assertEqual(result, {"count": 1, "total": "10.00"})
        self.assertTrue(BonusCalculation.objects.get(solicitor=self.solicitors["LOC-A"]).is_paid)
        self.assertFalse(BonusCalculation.objects.get(solicitor=self.solicitors["LOC-B"]).is_paid)
