"""
Giya configuration.

Usage in settings.py:
    GIYA = {
        "COMMISSION_RATE": "0.10",
        "REDEMPTION_TOKEN_TTL_HOURS": 24,
        "BUSINESS_BACKEND": "giya.adapters.settings_businesses.SettingsBusinessBackend",
        "REFERRAL_BACKEND": "giya.contrib.affiliates.adapters.AffiliateReferralBackend",
    }
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from django.conf import settings


@dataclass
class GiyaSettings:
    """Giya configuration settings."""

    # Fraction of the source accrual granted to the referrer
    COMMISSION_RATE: Decimal | str = "0.10"

    # Redemption tokens
    TOKEN_PREFIX: str = "GIYA-"
    TOKEN_BYTES: int = 24
    REDEMPTION_TOKEN_TTL_HOURS: int | None = None

    # Ledger Store retry policy
    TRANSACTION_MAX_ATTEMPTS: int = 3
    TRANSACTION_RETRY_BACKOFF: float = 0.05

    # External collaborators (dotted paths)
    BUSINESS_BACKEND: str = "giya.adapters.settings_businesses.SettingsBusinessBackend"
    REFERRAL_BACKEND: str = ""

    # Business profiles for SettingsBusinessBackend:
    #   {"biz-1": {"conversion_rate": "100", "is_active": True}}
    BUSINESSES: dict = field(default_factory=dict)

    # Affiliates contrib
    AFFILIATE_CODE_LENGTH: int = 8


def get_giya_settings() -> GiyaSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "GIYA", {})
    return GiyaSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_giya_settings(), name)


giya_settings = _LazySettings()
