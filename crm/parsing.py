# crm/parsing.py
"""Parsing of client supplied values (JSON bodies and query strings)."""
import json
from datetime import date
from decimal import Decimal, InvalidOperation

from django.utils.dateparse import parse_date

from .exceptions import ValidationError


def parse_json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_positive_int(value, field: str, required: bool = True):
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required", fields=[field])
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a positive integer", fields=[field])
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a positive integer", fields=[field])
    if number <= 0 or (isinstance(value, float) and value != number):
        raise ValidationError(f"{field} must be a positive integer", fields=[field])
    return number


def parse_bool(value, field: str):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"{field} must be true or false", fields=[field])


def parse_decimal(value, field: str):
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", fields=[field])
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number", fields=[field])
    return number


def parse_iso_date(value, field: str):
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)", fields=[field])
    return parsed


def parse_bounded_int(value, field: str, default: int, minimum: int, maximum: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", fields=[field])
    if number < minimum or number > maximum:
        raise ValidationError(f"{field} must be between {minimum} and {maximum}", fields=[field])
    return number
