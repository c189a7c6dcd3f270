from datetime import date
from decimal import Decimal

from django.contrib.admin.sites import AdminSite
from django.test import TestCase
from django.urls import reverse

from crm.models import User
from crm.tests.helpers import identity_for, make_contact, make_payment, make_pledge
from solicitors.admin import BonusCalculationAdmin
from solicitors.models import BonusCalculation, BonusRule, Solicitor
from solicitors.services import assign_payment


class BonusCalculationAdminTest(TestCase):
    def setUp(self):
        solicitor = Solicitor.objects.create(contact=make_contact("LOC-A"), location_id="LOC-A")
        BonusRule.objects.create(
            solicitor=solicitor, rule_name="Five", bonus_percentage=Decimal("5"), effective_from=date(2024, 1, 1)
        )
        pledge = make_pledge(make_contact("LOC-A"))
        for _ in range(2):
            payment = make_payment(pledge)
            assign_payment(identity_for(User.Role.ADMIN, "LOC-A"), payment.pk, solicitor.pk)

        self.superuser = User.objects.create_superuser("root", "root@example.org", "secret")
        self.client.force_login(self.superuser)

    def test_mark_selected_paid_action(self):
        ids = list(BonusCalculation.objects.values_list("pk", flat=True))
        response = self.client.post(
            reverse("admin:solicitors_bonuscalculation_changelist"),
            {"action": "mark_selected_paid", "_selected_action": ids},
        )
        self.assertEqual(response.status_code, 302)
        self.assertFalse(BonusCalculation.objects.filter(is_paid=False).exists())
        self.assertFalse(BonusCalculation.objects.filter(paid_at__isnull=True).exists())

    def test_registered(self):
        model_admin = BonusCalculationAdmin(BonusCalculation, AdminSite())
        self.assertIn("mark_selected_paid", model_admin.actions)
        self.assertEqual(self.client.get(reverse("admin:crm_payment_changelist")).status_code, 200)
