# crm/scoping.py
"""
Location scoping.

Admins are bound to one location; every query touching a partitioned model
goes through a ``LocationScope`` built once per request.  Super admins get an
unrestricted scope.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.db.models import Q

from .identity import Identity

# model label -> lookup path to the owning location id
PARTITION_PATHS = {
    "crm.contact": "location_id",
    "crm.pledge": "contact__location_id",
    "crm.payment": "pledge__contact__location_id",
    "solicitors.solicitor": "location_id",
    "solicitors.bonusrule": "solicitor__location_id",
    "solicitors.bonuscalculation": "solicitor__location_id",
}


@dataclass(frozen=True)
class LocationScope:
    location_id: Optional[str] = None

    @classmethod
    def for_identity(cls, identity: Identity) -> "LocationScope":
        identity.require_admin()
        if identity.is_scoped:
            return cls(location_id=identity.location_id)
        return cls()

    @property
    def is_restricted(self) -> bool:
        return self.location_id is not None

    @staticmethod
    def path_for(model) -> str:
        label = model._meta.label_lower
        try:
            return PARTITION_PATHS[label]
        except KeyError:
            raise LookupError(f"{label} is not location partitioned")

    def q(self, model) -> Q:
        """Predicate restricting ``model`` rows to the scoped location."""
        if not self.is_restricted:
            return Q()
        return Q(**{self.path_for(model): self.location_id})

    def apply(self, queryset):
        if not self.is_restricted:
            return queryset
        return queryset.filter(self.q(queryset.model))
