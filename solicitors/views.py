# solicitors/views.py
from django.db.models import ProtectedError, Q
from django.http import JsonResponse
from django.utils import timezone

from crm.exceptions import AuthorizationError, NotFoundError, ValidationError
from crm.http import json_endpoint
from crm.models import Contact, is_donation_category
from crm.parsing import (
    parse_bool,
    parse_bounded_int,
    parse_decimal,
    parse_iso_date,
    parse_json_body,
    parse_positive_int,
)
from crm.scoping import LocationScope

from .bonus import calculate_bonus, select_rule
from .forms import (
    BONUS_RULE_FIELDS,
    SOLICITOR_FIELDS,
    BonusRuleForm,
    SolicitorForm,
    form_data,
    raise_form_errors,
)
from .models import BonusCalculation, Solicitor
from .reports import dashboard_stats, top_performers
from .services import assign_payment, mark_calculation_paid, unassign_payment


def _get_visible_solicitor(scope, solicitor_id):
    solicitor = (
        scope.apply(Solicitor.objects.select_related("contact"))
        .filter(pk=solicitor_id)
        .first()
    )
    if solicitor is None:
        raise NotFoundError("Solicitor not found or access denied")
    return solicitor


# ======================================================
# SOLICITOR-PAYMENT ASSIGNMENT
# ======================================================
@json_endpoint("POST", action="assign payment")
def assign_solicitor_payment(request, identity, payment_id):
    body = parse_json_body(request)
    result = assign_payment(identity, payment_id, body.get("solicitorId"))
    return JsonResponse({
        "payment": result.payment.as_dict(),
        "bonusCalculated": result.bonus_calculated,
    })


@json_endpoint("POST", action="unassign payment")
def unassign_solicitor_payment(request, identity, payment_id):
    payment = unassign_payment(identity, payment_id)
    return JsonResponse({"payment": payment.as_dict()})


# ======================================================
# SOLICITORS
# ======================================================
@json_endpoint("GET", "POST", action="process solicitors")
def solicitor_collection(request, identity):
    scope = LocationScope.for_identity(identity)

    if request.method == "POST":
        body = parse_json_body(request)
        data = form_data(body, SOLICITOR_FIELDS, defaults={"status": "active"})
        if scope.is_restricted:
            if body.get("locationId") not in (None, "", scope.location_id):
                raise AuthorizationError("Admins can only create solicitors in their own location")
            data["location_id"] = scope.location_id

        form = SolicitorForm(data, contacts=scope.apply(Contact.objects.all()))
        if not form.is_valid():
            raise_form_errors(form, SOLICITOR_FIELDS)
        solicitor = form.save()
        return JsonResponse({"solicitor": solicitor.as_dict()}, status=201)

    solicitors = scope.apply(Solicitor.objects.select_related("contact"))
    status = request.GET.get("status")
    if status:
        if status not in dict(Solicitor.STATUS):
            raise ValidationError("Unknown solicitor status", fields=["status"])
        solicitors = solicitors.filter(status=status)
    search = (request.GET.get("search") or "").strip()
    if search:
        solicitors = solicitors.filter(
            Q(solicitor_code__icontains=search)
            | Q(contact__first_name__icontains=search)
            | Q(contact__last_name__icontains=search)
        )
    return JsonResponse({"solicitors": [s.as_dict() for s in solicitors]})


@json_endpoint("GET", "PUT", "DELETE", action="process solicitor")
def solicitor_detail(request, identity, solicitor_id):
    scope = LocationScope.for_identity(identity)
    solicitor = _get_visible_solicitor(scope, solicitor_id)

    if request.method == "PUT":
        body = parse_json_body(request)
        if "contactId" in body:
            raise ValidationError("contactId cannot be changed", fields=["contactId"])
        if scope.is_restricted and body.get("locationId", scope.location_id) != scope.location_id:
            raise AuthorizationError("Only super admins can move a solicitor to another location")

        form = SolicitorForm(
            form_data(body, SOLICITOR_FIELDS, instance=solicitor),
            instance=solicitor,
            contacts=Contact.objects.filter(pk=solicitor.contact_id),
        )
        if not form.is_valid():
            raise_form_errors(form, SOLICITOR_FIELDS)
        solicitor = form.save()
        return JsonResponse({"solicitor": solicitor.as_dict()})

    if request.method == "DELETE":
        try:
            solicitor.delete()
        except ProtectedError:
            raise ValidationError("Solicitor has assigned payments or bonus calculations and cannot be deleted")
        return JsonResponse({"message": "Solicitor deleted successfully"})

    return JsonResponse({"solicitor": solicitor.as_dict()})


# ======================================================
# BONUS RULES
# ======================================================
@json_endpoint("GET", "POST", action="process bonus rules")
def bonus_rule_collection(request, identity, solicitor_id):
    scope = LocationScope.for_identity(identity)
    solicitor = _get_visible_solicitor(scope, solicitor_id)

    if request.method == "POST":
        body = parse_json_body(request)
        defaults = {"payment_type": "both", "priority": 1, "is_active": True}
        form = BonusRuleForm(form_data(body, BONUS_RULE_FIELDS, defaults=defaults))
        if not form.is_valid():
            raise_form_errors(form, BONUS_RULE_FIELDS)
        rule = form.save(commit=False)
        rule.solicitor = solicitor
        rule.save()
        return JsonResponse({"bonusRule": rule.as_dict()}, status=201)

    rules = list(solicitor.bonus_rules.all())
    data = {"bonusRules": [r.as_dict() for r in rules]}

    # Optional preview: which rule would a payment with these attributes get?
    amount = parse_decimal(request.GET.get("amount"), "amount")
    if amount is not None:
        payment_date = parse_iso_date(request.GET.get("date"), "date") or timezone.localdate()
        is_donation = is_donation_category(request.GET.get("category"))
        rule = select_rule(rules, amount, payment_date, is_donation)
        result = calculate_bonus(amount, rule)
        data["preview"] = {
            "amount": amount,
            "paymentDate": payment_date,
            "isDonation": is_donation,
            "bonusRuleId": result.rule_id,
            "bonusPercentage": result.percentage,
            "bonusAmount": result.amount,
        }
    return JsonResponse(data)


# ======================================================
# BONUS CALCULATIONS
# ======================================================
@json_endpoint("GET", action="fetch bonus calculations")
def bonus_calculation_list(request, identity):
    scope = LocationScope.for_identity(identity)
    calculations = scope.apply(BonusCalculation.objects.all())

    solicitor_id = parse_positive_int(request.GET.get("solicitorId"), "solicitorId", required=False)
    if solicitor_id is not None:
        calculations = calculations.filter(solicitor_id=solicitor_id)
    is_paid = parse_bool(request.GET.get("isPaid"), "isPaid")
    if is_paid is not None:
        calculations = calculations.filter(is_paid=is_paid)

    limit = parse_bounded_int(request.GET.get("limit"), "limit", default=100, minimum=1, maximum=500)
    return JsonResponse({"bonusCalculations": [c.as_dict() for c in calculations[:limit]]})


@json_endpoint("POST", action="mark bonus paid")
def bonus_calculation_mark_paid(request, identity, calculation_id):
    calculation = mark_calculation_paid(identity, calculation_id)
    return JsonResponse({"bonusCalculation": calculation.as_dict()})


# ======================================================
# DASHBOARD
# ======================================================
@json_endpoint("GET", action="fetch dashboard stats")
def dashboard_stats_view(request, identity):
    scope = LocationScope.for_identity(identity)
    return JsonResponse(dashboard_stats(scope))


@json_endpoint("GET", action="fetch top performers")
def top_performers_view(request, identity):
    scope = LocationScope.for_identity(identity)
    limit = parse_bounded_int(request.GET.get("limit"), "limit", default=10, minimum=1, maximum=100)
    period = request.GET.get("period") or "all"
    return JsonResponse({"topPerformers": top_performers(scope, limit=limit, period=period)})
