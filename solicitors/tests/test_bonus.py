from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from crm.models import Category, is_donation_category
from crm.tests.helpers import make_contact
from solicitors.bonus import (
    applicable_rules,
    calculate_bonus,
    compute_bonus_amount,
    find_applicable_rule,
    select_rule,
)
from solicitors.models import BonusRule, Solicitor


def _rule(solicitor, **extra):
    data = {
        "solicitor": solicitor,
        "rule_name": "Rule",
        "bonus_percentage": Decimal("5.00"),
        "effective_from": date(2024, 1, 1),
    }
    data.update(extra)
    return BonusRule.objects.create(**data)


class CalculatorTest(SimpleTestCase):
    def test_rounding_is_half_up(self):
        self.assertEqual(compute_bonus_amount(Decimal("1000.00"), Decimal("5")), Decimal("50.00"))
        self.assertEqual(compute_bonus_amount(Decimal("200.00"), Decimal("3")), Decimal("6.00"))
        self.assertEqual(compute_bonus_amount(Decimal("10.10"), Decimal("2.5")), Decimal("0.25"))
        self.assertEqual(compute_bonus_amount(Decimal("0.10"), Decimal("5")), Decimal("0.01"))

    def test_no_rule_gives_zero_state(self):
        result = calculate_bonus(Decimal("1000"), None)
        self.assertEqual(result.amount, Decimal("0.00"))
        self.assertEqual(result.percentage, Decimal("0.00"))
        self.assertIsNone(result.rule_id)
        self.assertFalse(result.is_positive)

    def test_zero_percentage_rule_gives_zero_state(self):
        rule = BonusRule(rule_name="Zero", bonus_percentage=Decimal("0"))
        result = calculate_bonus(Decimal("1000"), rule)
        self.assertFalse(result.is_positive)
        self.assertIsNone(result.rule)

    def test_donation_category_detection(self):
        self.assertTrue(is_donation_category("General Donation"))
        self.assertTrue(is_donation_category("DONATIONS 2024"))
        self.assertFalse(is_donation_category("Tuition"))
        self.assertFalse(is_donation_category(None))

    def test_category_uses_same_donation_rule(self):
        for name in ("General Donation", "DONATIONS 2024", "Tuition", ""):
            self.assertEqual(Category(name=name).is_donation, is_donation_category(name))

    def test_matched_rule_rounding_to_zero_gives_zero_state(self):
        rule = BonusRule(pk=3, rule_name="Tiny", bonus_percentage=Decimal("5.00"))
        result = calculate_bonus(Decimal("0.05"), rule)
        self.assertEqual(result.amount, Decimal("0.00"))
        self.assertEqual(result.percentage, Decimal("0.00"))
        self.assertIsNone(result.rule_id)
        self.assertFalse(result.is_positive)


class MatcherTest(TestCase):
    """
    Rule selection:
    - active, in date window, payment type covers the payment, amount within bounds
    - highest priority wins, equal priority falls back to lowest id
    """

    def setUp(self):
        self.solicitor = Solicitor.objects.create(contact=make_contact("LOC-A"), location_id="LOC-A")
        self.other = Solicitor.objects.create(contact=make_contact("LOC-A"), location_id="LOC-A")

    def assertSameChoice(self, amount, payment_date, is_donation, expected):
        found = find_applicable_rule(self.solicitor.pk, amount, payment_date, is_donation)
        in_memory = select_rule(self.solicitor.bonus_rules.all(), amount, payment_date, is_donation)
        self.assertEqual(found, expected)
        self.assertEqual(in_memory, expected)

    def test_priority_wins(self):
        _rule(self.solicitor, rule_name="Low", priority=1)
        high = _rule(self.solicitor, rule_name="High", priority=5, bonus_percentage=Decimal("8"))
        self.assertSameChoice(Decimal("500"), date(2024, 6, 1), False, high)

    def test_equal_priority_lowest_id(self):
        first = _rule(self.solicitor, rule_name="First", priority=2)
        _rule(self.solicitor, rule_name="Second", priority=2)
        self.assertSameChoice(Decimal("500"), date(2024, 6, 1), False, first)

    def test_inactive_and_other_solicitor_rules_ignored(self):
        _rule(self.solicitor, is_active=False, priority=9)
        _rule(self.other, priority=9)
        self.assertSameChoice(Decimal("500"), date(2024, 6, 1), False, None)

    def test_date_window_inclusive(self):
        rule = _rule(self.solicitor, effective_from=date(2024, 2, 1), effective_to=date(2024, 2, 29))
        self.assertSameChoice(Decimal("10"), date(2024, 2, 1), False, rule)
        self.assertSameChoice(Decimal("10"), date(2024, 2, 29), False, rule)
        self.assertSameChoice(Decimal("10"), date(2024, 1, 31), False, None)
        self.assertSameChoice(Decimal("10"), date(2024, 3, 1), False, None)

    def test_payment_type(self):
        tuition = _rule(self.solicitor, payment_type="tuition", priority=3)
        donation = _rule(self.solicitor, payment_type="donation", priority=3)
        both = _rule(self.solicitor, payment_type="both", priority=1)
        self.assertSameChoice(Decimal("10"), date(2024, 6, 1), False, tuition)
        self.assertSameChoice(Decimal("10"), date(2024, 6, 1), True, donation)

        tuition.is_active = False
        tuition.save()
        self.assertSameChoice(Decimal("10"), date(2024, 6, 1), False, both)

    def test_amount_bounds_inclusive(self):
        rule = _rule(self.solicitor, min_amount=Decimal("100.00"), max_amount=Decimal("1000.00"))
        self.assertSameChoice(Decimal("100.00"), date(2024, 6, 1), False, rule)
        self.assertSameChoice(Decimal("1000.00"), date(2024, 6, 1), False, rule)
        self.assertSameChoice(Decimal("99.99"), date(2024, 6, 1), False, None)
        self.assertSameChoice(Decimal("1000.01"), date(2024, 6, 1), False, None)

    def test_applicable_rules_ordering(self):
        a = _rule(self.solicitor, priority=1)
        b = _rule(self.solicitor, priority=3)
        c = _rule(self.solicitor, priority=3)
        rules = applicable_rules(self.solicitor.pk, Decimal("10"), date(2024, 6, 1), False)
        self.assertEqual(list(rules), [b, c, a])
