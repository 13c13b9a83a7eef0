"""ReferralBackend adapter backed by affiliate attributions."""

from giya.contrib.affiliates.service import AffiliateService
from giya.protocols.referrals import Referral


class AffiliateReferralBackend:
    """
    Resolves referrers from AffiliateAttribution rows.

    Configuration in settings.py:
        GIYA = {
            "REFERRAL_BACKEND": "giya.contrib.affiliates.adapters.AffiliateReferralBackend",
        }
    """

    def resolve_referrer(self, account_id: str, business_id: str) -> Referral | None:
        attribution = AffiliateService.get_attribution(account_id, business_id)
        if attribution is None or not attribution.link.is_active:
            return None
        return Referral(
            referrer_account_id=attribution.link.referrer_account_id,
            commission_rate=attribution.link.commission_rate,
        )
