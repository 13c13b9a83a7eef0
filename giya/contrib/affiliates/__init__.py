"""
Giya Affiliates - Referral links and commission attribution.

Influencers share per-business links. A customer who arrives through a
link is attributed to it; later purchases at that business pay the
influencer a commission through the REFERRAL_BACKEND adapter.

Usage:
    INSTALLED_APPS = [
        ...
        "giya",
        "giya.contrib.affiliates",
    ]

    GIYA = {
        "REFERRAL_BACKEND": "giya.contrib.affiliates.adapters.AffiliateReferralBackend",
    }

    from giya.contrib.affiliates import AffiliateService

    link = AffiliateService.create_link("INF-001", "BIZ-001")
    AffiliateService.attribute("CUST-001", "BIZ-001", link.code)
"""


def __getattr__(name):
    if name == "AffiliateService":
        from giya.contrib.affiliates.service import AffiliateService

        return AffiliateService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["AffiliateService"]
