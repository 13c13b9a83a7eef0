"""Referral resolution protocol."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Referral:
    """Who referred a purchase, and at what rate."""

    referrer_account_id: str
    commission_rate: Decimal | None = None  # None = GIYA["COMMISSION_RATE"]


@runtime_checkable
class ReferralBackend(Protocol):
    """
    Protocol for resolving the referrer of a purchase.

    Implemented by giya.contrib.affiliates.adapters.AffiliateReferralBackend.

    Configuration in settings.py:
        GIYA = {
            "REFERRAL_BACKEND": "giya.contrib.affiliates.adapters.AffiliateReferralBackend",
        }
    """

    def resolve_referrer(self, account_id: str, business_id: str) -> Referral | None:
        """
        Return the referral for purchases by account_id at business_id.

        Args:
            account_id: Purchasing account
            business_id: Business where the purchase happened

        Returns:
            Referral or None when the purchase was not referred
        """
        ...
