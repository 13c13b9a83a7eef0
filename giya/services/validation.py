"""Validation service - business-side consumption of redemption tokens.

Validation never moves points; they were debited at issuance.
"""

import logging

from django.utils import timezone

from giya import store
from giya.exceptions import GiyaError
from giya.gates import Gates
from giya.models import RedemptionToken, TokenState
from giya.services.redemption import get_token
from giya.signals import emit, redemption_consumed

logger = logging.getLogger(__name__)


def lookup(token_id: str, presenting_business_id: str) -> RedemptionToken:
    """
    Preview a token before confirming (scan screen). Does not consume.

    Raises:
        GiyaError: same codes as validate()
    """
    token = get_token(token_id)
    Gates.token_usable(token, presenting_business_id)
    return token


def validate(
    token_id: str,
    presenting_business_id: str,
    validated_by: str = "",
) -> RedemptionToken:
    """
    Consume a redemption token exactly once.

    Args:
        token_id: Token as scanned or typed (exact match)
        presenting_business_id: Business presenting the token
        validated_by: Business actor (staff id); defaults to the business

    Returns:
        RedemptionToken in state CONSUMED

    Raises:
        GiyaError: TOKEN_NOT_FOUND, TOKEN_BUSINESS_MISMATCH,
            TOKEN_ALREADY_CONSUMED, TOKEN_EXPIRED
    """
    return store.with_transaction(_validate, token_id, presenting_business_id, validated_by)


def _validate(token_id, presenting_business_id, validated_by) -> RedemptionToken:
    token = get_token(token_id)
    now = timezone.now()

    try:
        Gates.token_usable(token, presenting_business_id, now)
    except GiyaError as exc:
        logger.warning(
            "Redemption %s rejected for business %s: %s",
            token.pk, presenting_business_id, exc.code,
        )
        raise

    consumed_by = validated_by or presenting_business_id
    won = store.transition_token(
        token.token_id,
        TokenState.ISSUED,
        TokenState.CONSUMED,
        consumed_at=now,
        consumed_by=consumed_by,
    )
    if not won:
        logger.warning("Redemption %s lost validation race", token.pk)
        raise GiyaError("TOKEN_ALREADY_CONSUMED")

    token.state = TokenState.CONSUMED
    token.consumed_at = now
    token.consumed_by = consumed_by

    logger.info("Redemption %s consumed at %s by %s", token.pk, presenting_business_id, consumed_by)
    emit(redemption_consumed, sender=RedemptionToken, token=token)
    return token
