"""BusinessBackend adapter backed by Django settings."""

from decimal import Decimal

from giya.conf import giya_settings
from giya.protocols.business import BusinessProfile


class SettingsBusinessBackend:
    """
    Reads business profiles from GIYA["BUSINESSES"].

    Configuration in settings.py:
        GIYA = {
            "BUSINESSES": {
                "biz-001": {"conversion_rate": "100", "is_active": True},
            },
        }

    Meant for development and single-tenant deployments; multi-tenant
    projects point BUSINESS_BACKEND at their own business directory.
    """

    def get_business(self, business_id: str) -> BusinessProfile | None:
        data = giya_settings.BUSINESSES.get(business_id)
        if data is None:
            return None
        return BusinessProfile(
            business_id=business_id,
            conversion_rate=Decimal(str(data["conversion_rate"])),
            is_active=data.get("is_active", True),
        )
