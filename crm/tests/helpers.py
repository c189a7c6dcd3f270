# crm/tests/helpers.py
from datetime import date
from decimal import Decimal

from crm.identity import Identity
from crm.models import Category, Contact, Payment, Pledge, User

_seq = {"n": 0}


def _next():
    _seq["n"] += 1
    return _seq["n"]


def make_user(role=User.Role.ADMIN, location_id="LOC-A", **extra):
    n = _next()
    return User.objects.create_user(
        username=f"user{n}",
        email=f"user{n}@example.org",
        password="secret",
        role=role,
        location_id=location_id,
        **extra,
    )


def identity_for(role=User.Role.ADMIN, location_id="LOC-A", user_id=1):
    return Identity(user_id=user_id, email=f"{role}@example.org", role=role, location_id=location_id)


def make_contact(location_id="LOC-A", **extra):
    n = _next()
    data = {"first_name": f"First{n}", "last_name": f"Last{n}", "location_id": location_id}
    data.update(extra)
    return Contact.objects.create(**data)


def make_category(name="Tuition"):
    return Category.objects.get_or_create(name=name)[0]


def make_pledge(contact, category=None, amount="1000.00", pledge_date=date(2024, 1, 10), **extra):
    return Pledge.objects.create(
        contact=contact,
        category=category,
        pledge_date=pledge_date,
        original_amount=Decimal(amount),
        **extra,
    )


def make_payment(pledge, amount="1000.00", payment_date=date(2024, 3, 15), **extra):
    return Payment.objects.create(
        pledge=pledge,
        amount=Decimal(amount),
        payment_date=payment_date,
        **extra,
    )
