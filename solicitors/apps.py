# solicitors/apps.py
from django.apps import AppConfig


class SolicitorsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "solicitors"
    verbose_name = "Solicitors & bonuses"
