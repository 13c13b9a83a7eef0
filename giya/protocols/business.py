"""Business profile protocol for cross-app communication."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class BusinessProfile:
    """What the ledger needs to know about a business."""

    business_id: str
    conversion_rate: Decimal  # currency units per point
    is_active: bool = True


@runtime_checkable
class BusinessBackend(Protocol):
    """
    Protocol for read-only business profile lookup.

    Used by the accrual service to find a business's conversion rate.

    Configuration in settings.py:
        GIYA = {
            "BUSINESS_BACKEND": "giya.adapters.settings_businesses.SettingsBusinessBackend",
        }
    """

    def get_business(self, business_id: str) -> BusinessProfile | None:
        """
        Return the business profile.

        Args:
            business_id: Business identifier

        Returns:
            BusinessProfile or None if unknown
        """
        ...
