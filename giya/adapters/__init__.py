"""Giya adapters for external collaborators.

Backends are configured by dotted path and loaded with get_business_backend()
and get_referral_backend().
"""

from django.utils.module_loading import import_string

from giya.conf import giya_settings
from giya.protocols import BusinessBackend, ReferralBackend


def get_business_backend() -> BusinessBackend:
    """Get configured BusinessBackend."""
    return import_string(giya_settings.BUSINESS_BACKEND)()


def get_referral_backend() -> ReferralBackend | None:
    """Get configured ReferralBackend, or None when referrals are off."""
    backend_path = giya_settings.REFERRAL_BACKEND
    if backend_path:
        return import_string(backend_path)()
    return None
