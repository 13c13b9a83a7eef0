"""Redemption service - spend points on an offer.

Points are debited at issuance, together with the offer counter increment
and the token insert. Validation later only flips the token state.
"""

import logging
import secrets
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.utils import timezone

from giya import store
from giya.conf import giya_settings
from giya.exceptions import GiyaError
from giya.gates import Gates
from giya.models import Offer, RedemptionToken, TokenState
from giya.signals import emit, redemption_cancelled, redemption_issued

logger = logging.getLogger(__name__)


def mint_token_id() -> str:
    """Unguessable token string for QR codes and manual entry."""
    return f"{giya_settings.TOKEN_PREFIX}{secrets.token_urlsafe(giya_settings.TOKEN_BYTES)}"


def get_offer(offer_id) -> Offer:
    """Get offer or raise OFFER_NOT_FOUND."""
    try:
        return Offer.objects.get(pk=offer_id)
    except (Offer.DoesNotExist, ValidationError, ValueError):
        raise GiyaError("OFFER_NOT_FOUND", offer_id=str(offer_id))


def get_token(token_id: str) -> RedemptionToken:
    """Get token by exact token_id or raise TOKEN_NOT_FOUND."""
    try:
        return RedemptionToken.objects.select_related("offer").get(token_id=token_id)
    except RedemptionToken.DoesNotExist:
        raise GiyaError("TOKEN_NOT_FOUND")


def issue(account_id: str, offer_id) -> RedemptionToken:
    """
    Redeem an offer for account_id.

    Steps (one transaction): offer gates, per-account limit, balance
    check, debit, claim one unit of the offer, mint and store the token.
    If the claim loses a race for the last unit the debit is rolled back
    with everything else.

    Args:
        account_id: Redeeming account
        offer_id: Offer to redeem

    Returns:
        RedemptionToken in state ISSUED

    Raises:
        GiyaError: OFFER_NOT_FOUND, OFFER_INACTIVE, OFFER_EXPIRED,
            OFFER_NOT_AVAILABLE_NOW, OFFER_EXHAUSTED,
            OFFER_ACCOUNT_LIMIT_REACHED, INSUFFICIENT_BALANCE
    """
    return store.with_transaction(_issue, account_id, offer_id)


def _issue(account_id, offer_id) -> RedemptionToken:
    now = timezone.now()
    offer = get_offer(offer_id)
    Gates.offer_redeemable(offer, now)
    limited = offer.per_account_limit is not None
    if limited:
        Gates.offer_account_limit(offer, store.count_account_redemptions(account_id, offer.pk))

    available = store.get_balance(account_id)
    if available < offer.points_required:
        raise GiyaError(
            "INSUFFICIENT_BALANCE",
            account_id=account_id,
            available=available,
            requested=offer.points_required,
        )

    balance = store.adjust_balance(account_id, -offer.points_required)
    if limited:
        # Re-count under the account row lock taken by the debit
        Gates.offer_account_limit(offer, store.count_account_redemptions(account_id, offer.pk))

    if not store.claim_offer_unit(offer.pk):
        raise GiyaError(
            "OFFER_EXHAUSTED",
            offer_id=str(offer.pk),
            redemption_limit=offer.redemption_limit,
        )

    ttl_hours = giya_settings.REDEMPTION_TOKEN_TTL_HOURS
    token = store.append_record(
        RedemptionToken(
            token_id=mint_token_id(),
            account_id=account_id,
            offer=offer,
            owning_business_id=offer.owning_business_id,
            points_debited=offer.points_required,
            state=TokenState.ISSUED,
            issued_at=now,
            expires_at=now + timedelta(hours=ttl_hours) if ttl_hours else None,
        )
    )

    logger.info(
        "Issued redemption of offer %s to %s (-%d pts, balance %d)",
        offer.pk, account_id, offer.points_required, balance,
    )
    emit(redemption_issued, sender=RedemptionToken, token=token, balance=balance)
    return token


def cancel(token_id: str, reason: str = "", account_id: str | None = None) -> RedemptionToken:
    """
    Cancel an issued redemption and refund its points.

    The offer's redemption_count is not decremented.

    Args:
        token_id: Token to cancel
        reason: Why (stored on the token)
        account_id: When given, the token must belong to this account

    Returns:
        RedemptionToken in state CANCELLED

    Raises:
        GiyaError: TOKEN_NOT_FOUND, TOKEN_ACCOUNT_MISMATCH,
            TOKEN_ALREADY_CONSUMED
    """
    return store.with_transaction(_cancel, token_id, reason, account_id)


def _cancel(token_id, reason, account_id) -> RedemptionToken:
    token = get_token(token_id)
    if account_id is not None and token.account_id != account_id:
        raise GiyaError("TOKEN_ACCOUNT_MISMATCH")
    Gates.token_issued(token)

    now = timezone.now()
    won = store.transition_token(
        token.token_id,
        TokenState.ISSUED,
        TokenState.CANCELLED,
        cancelled_at=now,
        cancel_reason=reason[:200],
    )
    if not won:
        raise GiyaError("TOKEN_ALREADY_CONSUMED")

    balance = store.adjust_balance(token.account_id, token.points_debited)
    token.refresh_from_db()

    logger.info(
        "Cancelled redemption %s for %s (+%d pts refunded): %s",
        token.pk, token.account_id, token.points_debited, reason or "-",
    )
    emit(redemption_cancelled, sender=RedemptionToken, token=token, balance=balance)
    return token


def expired_tokens(now=None):
    """Issued tokens past their expires_at."""
    return RedemptionToken.objects.filter(
        state=TokenState.ISSUED,
        expires_at__isnull=False,
        expires_at__lte=now or timezone.now(),
    )
