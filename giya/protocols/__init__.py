"""Giya protocols."""

from giya.protocols.business import BusinessBackend, BusinessProfile
from giya.protocols.referrals import Referral, ReferralBackend

__all__ = [
    # Businesses
    "BusinessBackend",
    "BusinessProfile",
    # Referrals
    "Referral",
    "ReferralBackend",
]
