"""Affiliates app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AffiliatesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "giya.contrib.affiliates"
    label = "giya_affiliates"
    verbose_name = _("Affiliates")
