"""
Giya Gates - Redemption rules.

R1: OfferActive - Offer must be switched on by its business
R2: OfferValidity - Now must fall inside validity_start/validity_end
R3: OfferSchedule - Now must match the offer's day/time schedule
R4: OfferCapacity - Limited offers must have units left
R5: OfferAccountLimit - An account may not exceed the offer's per-account limit
T1: TokenBusinessMatch - Token can only be presented at its own business
T2: TokenIssued - Token must not be consumed or cancelled
T3: TokenNotExpired - Token must be presented before expires_at

Gates read already-loaded rows; they never write. R4 is advisory: the
authoritative capacity check is the conditional increment in
giya.store.claim_offer_unit(). R5 is re-checked by the issuer after the
debit, once the account row is locked.
"""

from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from giya.exceptions import GiyaError
from giya.models import Offer, RedemptionToken, TokenState


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


class Gates:
    """Giya validation gates."""

    # =========================================================================
    # Offers
    # =========================================================================

    @classmethod
    def offer_active(cls, offer: Offer) -> GateResult:
        """R1: Offer must be active."""
        if not offer.is_active:
            raise GiyaError("OFFER_INACTIVE", offer_id=str(offer.pk))
        return GateResult(True, "R1_OfferActive")

    @classmethod
    def offer_validity(cls, offer: Offer, now: datetime | None = None) -> GateResult:
        """R2: Now must be inside the validity window."""
        if not offer.is_within_validity(now):
            raise GiyaError(
                "OFFER_EXPIRED",
                offer_id=str(offer.pk),
                validity_start=offer.validity_start.isoformat() if offer.validity_start else None,
                validity_end=offer.validity_end.isoformat() if offer.validity_end else None,
            )
        return GateResult(True, "R2_OfferValidity")

    @classmethod
    def offer_schedule(cls, offer: Offer, now: datetime | None = None) -> GateResult:
        """R3: Now must match the day/time schedule."""
        if not offer.is_within_schedule(now):
            raise GiyaError(
                "OFFER_NOT_AVAILABLE_NOW",
                offer_id=str(offer.pk),
                schedule_type=offer.schedule_type,
            )
        return GateResult(True, "R3_OfferSchedule")

    @classmethod
    def offer_capacity(cls, offer: Offer) -> GateResult:
        """R4: Limited offers must have units left."""
        if offer.is_exhausted:
            raise GiyaError(
                "OFFER_EXHAUSTED",
                offer_id=str(offer.pk),
                redemption_limit=offer.redemption_limit,
            )
        return GateResult(True, "R4_OfferCapacity")

    @classmethod
    def offer_account_limit(cls, offer: Offer, used: int) -> GateResult:
        """R5: used = the account's issued and consumed tokens for this offer."""
        if offer.per_account_limit is not None and used >= offer.per_account_limit:
            raise GiyaError(
                "OFFER_ACCOUNT_LIMIT_REACHED",
                offer_id=str(offer.pk),
                per_account_limit=offer.per_account_limit,
            )
        return GateResult(True, "R5_OfferAccountLimit")

    @classmethod
    def offer_redeemable(cls, offer: Offer, now: datetime | None = None) -> GateResult:
        """R1-R4 in order. The first failing gate raises."""
        now = now or timezone.now()
        cls.offer_active(offer)
        cls.offer_validity(offer, now)
        cls.offer_schedule(offer, now)
        cls.offer_capacity(offer)
        return GateResult(True, "OfferRedeemable")

    @classmethod
    def check_offer_redeemable(cls, offer: Offer, now: datetime | None = None) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.offer_redeemable(offer, now)
            return True
        except GiyaError:
            return False

    # =========================================================================
    # Tokens
    # =========================================================================

    @classmethod
    def token_business_match(cls, token: RedemptionToken, business_id: str) -> GateResult:
        """T1: Token from business A cannot be redeemed at business B."""
        if token.owning_business_id != business_id:
            raise GiyaError(
                "TOKEN_BUSINESS_MISMATCH",
                presenting_business_id=business_id,
            )
        return GateResult(True, "T1_TokenBusinessMatch")

    @classmethod
    def token_issued(cls, token: RedemptionToken) -> GateResult:
        """T2: Only issued tokens can be consumed or cancelled."""
        if token.state != TokenState.ISSUED:
            raise GiyaError("TOKEN_ALREADY_CONSUMED", state=token.state)
        return GateResult(True, "T2_TokenIssued")

    @classmethod
    def token_not_expired(cls, token: RedemptionToken, now: datetime | None = None) -> GateResult:
        """T3: Token must be presented before it expires."""
        if token.is_expired(now):
            raise GiyaError(
                "TOKEN_EXPIRED",
                expires_at=token.expires_at.isoformat(),
            )
        return GateResult(True, "T3_TokenNotExpired")

    @classmethod
    def token_usable(
        cls,
        token: RedemptionToken,
        business_id: str,
        now: datetime | None = None,
    ) -> GateResult:
        """T1-T3 in order."""
        cls.token_business_match(token, business_id)
        cls.token_issued(token)
        cls.token_not_expired(token, now)
        return GateResult(True, "TokenUsable")

    @classmethod
    def check_token_usable(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.token_usable(*args, **kwargs)
            return True
        except GiyaError:
            return False
