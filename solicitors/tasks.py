# solicitors/tasks.py
from celery import shared_task
from django.utils import timezone

from crm.scoping import LocationScope

from .services import payout_bonuses


@shared_task
def payout_bonuses_task(solicitor_id=None):
    """
    Monthly payout: mark every bonus calculated before the start of the
    current month as paid (all locations).
    """
    cutoff = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    summary = payout_bonuses(LocationScope(), solicitor_id=solicitor_id, calculated_before=cutoff)
    return {"count": summary.count, "total": str(summary.total)}
