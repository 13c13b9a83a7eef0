from django.apps import AppConfig


class GiyaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "giya"
    verbose_name = "Giya - Points Ledger"
