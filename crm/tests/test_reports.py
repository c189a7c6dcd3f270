from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from crm.reports import monthly_trends, months_ago
from crm.scoping import LocationScope
from crm.tests.helpers import make_contact, make_payment, make_pledge


class MonthsAgoTest(SimpleTestCase):
    def test_clamps_to_month_end(self):
        self.assertEqual(months_ago(date(2024, 3, 31), 1), date(2024, 2, 29))
        self.assertEqual(months_ago(date(2024, 1, 15), 2), date(2023, 11, 15))
        self.assertEqual(months_ago(date(2024, 5, 31), 12), date(2023, 5, 31))
        self.assertEqual(months_ago(date(2024, 5, 31), 0), date(2024, 5, 31))


class MonthlyTrendsTest(TestCase):
    def setUp(self):
        contact = make_contact("LOC-A")
        pledge = make_pledge(contact, amount="500.00", pledge_date=date(2024, 2, 5))
        make_pledge(contact, amount="300.00", pledge_date=date(2024, 4, 1), original_amount_usd=Decimal("80.00"))
        make_payment(pledge, amount="100.00", payment_date=date(2024, 3, 3))
        make_payment(pledge, amount="50.00", payment_date=date(2024, 3, 20), amount_usd=Decimal("40.00"))
        make_payment(pledge, amount="999.00", payment_date=date(2024, 3, 21), payment_status="failed")

        other = make_contact("LOC-B")
        make_pledge(other, amount="700.00", pledge_date=date(2024, 2, 6))

    def test_totals_per_month(self):
        data = monthly_trends(LocationScope(location_id="LOC-A"), months=3, today=date(2024, 4, 10))
        self.assertEqual(data["months"], ["2024-02", "2024-03", "2024-04"])
        self.assertEqual(data["labels"], ["Feb", "Mar", "Apr"])
        self.assertEqual(data["pledges"], [Decimal("500.00"), Decimal("0.00"), Decimal("80.00")])
        self.assertEqual(data["payments"], [Decimal("0.00"), Decimal("140.00"), Decimal("0.00")])

    def test_unrestricted_scope_includes_other_locations(self):
        data = monthly_trends(LocationScope(), months=3, today=date(2024, 4, 10))
        self.assertEqual(data["pledges"][0], Decimal("1200.00"))

    def test_window_across_year_boundary(self):
        data = monthly_trends(LocationScope(), months=4, today=date(2024, 1, 31))
        self.assertEqual(data["months"], ["2023-10", "2023-11", "2023-12", "2024-01"])
