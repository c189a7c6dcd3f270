from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from crm.models import User
from crm.tests.helpers import make_contact, make_payment, make_pledge, make_user
from solicitors.models import Solicitor


class PaymentListTest(TestCase):
    def setUp(self):
        self.admin = make_user(User.Role.ADMIN, "LOC-A")
        contact = make_contact("LOC-A")
        pledge = make_pledge(contact)
        self.solicitor = Solicitor.objects.create(contact=make_contact("LOC-A"), location_id="LOC-A")

        self.payments = [
            make_payment(pledge, amount="100.00", payment_date=date(2024, 1, d))
            for d in range(1, 13)
        ]
        self.payments[0].solicitor = self.solicitor
        self.payments[0].save()
        self.payments[1].payment_status = "pending"
        self.payments[1].save()

        # other location
        make_payment(make_pledge(make_contact("LOC-B")))
        self.client.force_login(self.admin)

    def test_default_pagination(self):
        response = self.client.get(reverse("payment_list"))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data["payments"]), 10)
        self.assertEqual(data["pagination"], {
            "page": 1,
            "limit": 10,
            "totalCount": 12,
            "totalPages": 2,
            "hasNextPage": True,
            "hasPreviousPage": False,
        })
        # newest first
        self.assertEqual(data["payments"][0]["paymentDate"], "2024-01-12")

    def test_second_page(self):
        data = self.client.get(reverse("payment_list"), {"page": 2}).json()
        self.assertEqual(len(data["payments"]), 2)
        self.assertFalse(data["pagination"]["hasNextPage"])
        self.assertTrue(data["pagination"]["hasPreviousPage"])

    def test_filters(self):
        url = reverse("payment_list")
        data = self.client.get(url, {"hasSolicitor": "true"}).json()
        self.assertEqual([p["id"] for p in data["payments"]], [self.payments[0].pk])

        data = self.client.get(url, {"solicitorId": self.solicitor.pk}).json()
        self.assertEqual(data["pagination"]["totalCount"], 1)

        data = self.client.get(url, {"hasSolicitor": "false", "limit": 100}).json()
        self.assertEqual(data["pagination"]["totalCount"], 11)

        data = self.client.get(url, {"status": "pending"}).json()
        self.assertEqual([p["id"] for p in data["payments"]], [self.payments[1].pk])

        data = self.client.get(url, {"startDate": "2024-01-10", "endDate": "2024-01-11"}).json()
        self.assertEqual(data["pagination"]["totalCount"], 2)

    def test_bad_filters(self):
        url = reverse("payment_list")
        self.assertEqual(self.client.get(url, {"status": "lost"}).status_code, 400)
        self.assertEqual(self.client.get(url, {"limit": 500}).status_code, 400)
        self.assertEqual(self.client.get(url, {"solicitorId": "x"}).status_code, 400)

    def test_method_not_allowed(self):
        response = self.client.post(reverse("payment_list"))
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response["Allow"], "GET")


class BoundaryTest(TestCase):
    def test_anonymous_gets_401(self):
        response = self.client.get(reverse("payment_list"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Unauthorized")

    def test_plain_user_gets_403(self):
        self.client.force_login(make_user(User.Role.USER, "LOC-A"))
        response = self.client.get(reverse("payment_list"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Admin access required")

    def test_admin_without_location_gets_403(self):
        self.client.force_login(make_user(User.Role.ADMIN, None))
        response = self.client.get(reverse("location_list"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Admin location not found")

    def test_database_error_becomes_500(self):
        self.client.force_login(make_user(User.Role.SUPER_ADMIN, None))
        with mock.patch("crm.views.monthly_trends", side_effect=DatabaseError("boom")):
            with self.assertLogs("crm.http", level="ERROR"):
                response = self.client.get(reverse("dashboard_trends"))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to fetch dashboard trends"})


class LocationListTest(TestCase):
    def setUp(self):
        make_contact("LOC-B")
        make_contact("LOC-A")
        make_contact("LOC-A")
        make_contact(None)

    def test_super_admin_sees_all_locations(self):
        self.client.force_login(make_user(User.Role.SUPER_ADMIN, None))
        data = self.client.get(reverse("location_list")).json()
        self.assertEqual(data["locations"], [
            {"id": "LOC-A", "name": "LOC-A"},
            {"id": "LOC-B", "name": "LOC-B"},
        ])

    def test_admin_sees_own_location(self):
        self.client.force_login(make_user(User.Role.ADMIN, "LOC-B"))
        data = self.client.get(reverse("location_list")).json()
        self.assertEqual(data["locations"], [{"id": "LOC-B", "name": "LOC-B"}])


class DashboardTrendsTest(TestCase):
    def setUp(self):
        self.client.force_login(make_user(User.Role.ADMIN, "LOC-A"))

    def test_months_bounds(self):
        url = reverse("dashboard_trends")
        self.assertEqual(self.client.get(url, {"months": 0}).status_code, 400)
        self.assertEqual(self.client.get(url, {"months": 37}).status_code, 400)

        data = self.client.get(url, {"months": 3}).json()
        self.assertEqual(len(data["labels"]), 3)
        self.assertEqual(len(data["months"]), 3)
        self.assertEqual(data["pledges"], ["0.00", "0.00", "0.00"])
