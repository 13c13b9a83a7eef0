"""Commission service - referrer's share of an accrual.

amount = floor(points_granted * commission_rate). At most one grant exists
per AccrualRecord; propagating twice returns the first grant.
"""

import logging
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from giya import store
from giya.conf import giya_settings
from giya.exceptions import GiyaError
from giya.models import AccountKind, AccrualRecord, CommissionGrant
from giya.signals import commission_granted, emit

logger = logging.getLogger(__name__)

RATE_QUANTUM = Decimal("0.0001")


def compute_commission(points_granted: int, commission_rate: Decimal) -> int:
    return int((Decimal(points_granted) * commission_rate).to_integral_value(rounding=ROUND_FLOOR))


def get_grant(record: AccrualRecord) -> CommissionGrant | None:
    """Existing grant for an accrual, if any."""
    return CommissionGrant.objects.filter(source_record_id=record.pk).first()


def propagate(
    record: AccrualRecord,
    referrer_account_id: str,
    commission_rate=None,
) -> CommissionGrant:
    """
    Credit the referrer's commission for an accrual, idempotently.

    Zero-amount grants are recorded without touching the balance.

    Args:
        record: Source AccrualRecord (or its record_id)
        referrer_account_id: Account receiving the commission
        commission_rate: Fraction of points_granted; defaults to
            GIYA["COMMISSION_RATE"]

    Returns:
        CommissionGrant (new, or the one already recorded for record)

    Raises:
        GiyaError: SELF_REFERRAL, INVALID_COMMISSION_RATE
        AccrualRecord.DoesNotExist: If record_id is unknown
    """
    if not isinstance(record, AccrualRecord):
        record = AccrualRecord.objects.get(pk=record)

    if referrer_account_id == record.account_id:
        raise GiyaError("SELF_REFERRAL", account_id=referrer_account_id)

    rate = _rate(commission_rate)

    existing = get_grant(record)
    if existing:
        logger.info("Commission for accrual %s already granted", record.pk)
        return existing

    try:
        return store.with_transaction(_propagate, record, referrer_account_id, rate)
    except GiyaError as exc:
        # Another propagation inserted first and rolled our credit back.
        if exc.code == "DUPLICATE_RECORD":
            existing = get_grant(record)
            if existing:
                return existing
        raise


def _propagate(record, referrer_account_id, rate) -> CommissionGrant:
    existing = get_grant(record)
    if existing:
        return existing

    amount = compute_commission(record.points_granted, rate)
    if amount > 0:
        store.adjust_balance(referrer_account_id, amount, kind=AccountKind.INFLUENCER)

    grant = store.append_record(
        CommissionGrant(
            referrer_account_id=referrer_account_id,
            source_record=record,
            commission_rate=rate,
            amount=amount,
        )
    )

    logger.info(
        "Commission %d pts to %s for accrual %s (rate %s)",
        amount, referrer_account_id, record.pk, rate,
    )
    emit(commission_granted, sender=CommissionGrant, grant=grant)
    return grant


def _rate(commission_rate) -> Decimal:
    if commission_rate is None:
        commission_rate = giya_settings.COMMISSION_RATE
    return validate_rate(commission_rate)


def validate_rate(commission_rate) -> Decimal:
    """
    Commission rate as Decimal in [0, 1].

    Raises:
        GiyaError: INVALID_COMMISSION_RATE
    """
    try:
        rate = Decimal(str(commission_rate))
    except (InvalidOperation, ValueError):
        raise GiyaError("INVALID_COMMISSION_RATE", commission_rate=str(commission_rate))
    if not rate.is_finite() or not (0 <= rate <= 1):
        raise GiyaError("INVALID_COMMISSION_RATE", commission_rate=str(commission_rate))
    # Stored with 4 decimal places; the amount is computed from the stored rate
    return rate.quantize(RATE_QUANTUM, rounding=ROUND_FLOOR)
