"""Affiliate service — referral links and attribution."""

import logging
import secrets
import string

from django.db import IntegrityError, transaction

from giya.conf import giya_settings
from giya.contrib.affiliates.models import AffiliateAttribution, AffiliateLink
from giya.exceptions import GiyaError
from giya.services.commission import validate_rate

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_CODE_ATTEMPTS = 10


class AffiliateService:
    """
    Service for affiliate link operations.

    Uses @classmethod for extensibility (consistent with other contrib services).
    """

    @classmethod
    def generate_code(cls) -> str:
        """Random A-Z0-9 code of AFFILIATE_CODE_LENGTH characters."""
        length = giya_settings.AFFILIATE_CODE_LENGTH
        return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))

    @classmethod
    def create_link(
        cls,
        referrer_account_id: str,
        business_id: str,
        commission_rate=None,
    ) -> AffiliateLink:
        """
        Create a referral link with a fresh code.

        Args:
            referrer_account_id: Influencer account earning the commission
            business_id: Business the link points to
            commission_rate: Fraction of the customer's points (optional)

        Returns:
            Created AffiliateLink

        Raises:
            GiyaError: INVALID_COMMISSION_RATE, AFFILIATE_CODE_UNAVAILABLE
        """
        rate = validate_rate(commission_rate) if commission_rate is not None else None

        for _ in range(_MAX_CODE_ATTEMPTS):
            code = cls.generate_code()
            if AffiliateLink.objects.filter(business_id=business_id, code=code).exists():
                continue
            try:
                with transaction.atomic():
                    return AffiliateLink.objects.create(
                        referrer_account_id=referrer_account_id,
                        business_id=business_id,
                        code=code,
                        commission_rate=rate,
                    )
            except IntegrityError:
                # Taken between the check and the insert
                continue

        raise GiyaError("AFFILIATE_CODE_UNAVAILABLE", business_id=business_id)

    @classmethod
    def get_link(cls, business_id: str, code: str) -> AffiliateLink | None:
        """Active link for code at business, or None."""
        return AffiliateLink.objects.filter(
            business_id=business_id,
            code=code.strip().upper(),
            is_active=True,
        ).first()

    @classmethod
    def attribute(cls, account_id: str, business_id: str, code: str) -> AffiliateAttribution:
        """
        Attribute a customer to the link they arrived through.

        Idempotent — the first attribution for (account, business) is kept
        and returned on later calls, whatever their code.

        Raises:
            GiyaError: AFFILIATE_LINK_NOT_FOUND, SELF_REFERRAL
        """
        existing = cls.get_attribution(account_id, business_id)
        if existing:
            return existing

        link = cls.get_link(business_id, code)
        if link is None:
            raise GiyaError("AFFILIATE_LINK_NOT_FOUND", business_id=business_id, link_code=code)
        if link.referrer_account_id == account_id:
            raise GiyaError("SELF_REFERRAL", account_id=account_id)

        attribution, created = AffiliateAttribution.objects.get_or_create(
            account_id=account_id,
            business_id=business_id,
            defaults={"link": link},
        )
        if created:
            logger.info("Attributed %s at %s to link %s", account_id, business_id, link.code)
        return attribution

    @classmethod
    def get_attribution(cls, account_id: str, business_id: str) -> AffiliateAttribution | None:
        return (
            AffiliateAttribution.objects.select_related("link")
            .filter(account_id=account_id, business_id=business_id)
            .first()
        )

    @classmethod
    def deactivate_link(cls, link_id: int) -> AffiliateLink:
        """Stop paying commissions through a link. Attributions are kept."""
        link = AffiliateLink.objects.get(pk=link_id)
        if link.is_active:
            link.is_active = False
            link.save(update_fields=["is_active"])
        return link
