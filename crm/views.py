# crm/views.py
from django.core.paginator import Paginator
from django.http import JsonResponse

from .exceptions import ValidationError
from .http import json_endpoint
from .models import Contact, Payment
from .parsing import parse_bool, parse_bounded_int, parse_iso_date, parse_positive_int
from .reports import monthly_trends
from .scoping import LocationScope


# ======================================================
# PAYMENTS (read only listing; writes go through the assignment service)
# ======================================================
@json_endpoint("GET", action="fetch payments")
def payment_list(request, identity):
    scope = LocationScope.for_identity(identity)
    payments = scope.apply(Payment.objects.all())

    solicitor_id = parse_positive_int(request.GET.get("solicitorId"), "solicitorId", required=False)
    if solicitor_id is not None:
        payments = payments.filter(solicitor_id=solicitor_id)

    has_solicitor = parse_bool(request.GET.get("hasSolicitor"), "hasSolicitor")
    if has_solicitor is not None:
        payments = payments.filter(solicitor__isnull=not has_solicitor)

    status = request.GET.get("status")
    if status:
        if status not in dict(Payment.STATUS):
            raise ValidationError("Unknown payment status", fields=["status"])
        payments = payments.filter(payment_status=status)

    start = parse_iso_date(request.GET.get("startDate"), "startDate")
    if start:
        payments = payments.filter(payment_date__gte=start)
    end = parse_iso_date(request.GET.get("endDate"), "endDate")
    if end:
        payments = payments.filter(payment_date__lte=end)

    page_number = parse_bounded_int(request.GET.get("page"), "page", default=1, minimum=1, maximum=1_000_000)
    limit = parse_bounded_int(request.GET.get("limit"), "limit", default=10, minimum=1, maximum=100)

    paginator = Paginator(payments.order_by("-payment_date", "-id"), limit)
    page = paginator.get_page(page_number)

    return JsonResponse({
        "payments": [p.as_dict() for p in page.object_list],
        "pagination": {
            "page": page.number,
            "limit": limit,
            "totalCount": paginator.count,
            "totalPages": paginator.num_pages,
            "hasNextPage": page.has_next(),
            "hasPreviousPage": page.has_previous(),
        },
    })


# ======================================================
# LOCATIONS
# ======================================================
@json_endpoint("GET", action="fetch locations")
def location_list(request, identity):
    scope = LocationScope.for_identity(identity)
    location_ids = (
        scope.apply(Contact.objects.filter(location_id__isnull=False))
        .exclude(location_id="")
        .order_by("location_id")
        .values_list("location_id", flat=True)
        .distinct()
    )
    # no locations table: the id doubles as the display name
    return JsonResponse({"locations": [{"id": loc, "name": loc} for loc in location_ids]})


# ======================================================
# DASHBOARD
# ======================================================
@json_endpoint("GET", action="fetch dashboard trends")
def dashboard_trends(request, identity):
    scope = LocationScope.for_identity(identity)
    months = parse_bounded_int(request.GET.get("months"), "months", default=6, minimum=1, maximum=36)
    return JsonResponse(monthly_trends(scope, months=months))
