"""Accrual service - award points for a completed purchase.

points_granted = floor(amount_spent / conversion_rate), computed in Decimal.
Zero-point accruals are recorded for audit but never touch the balance.
"""

import logging
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from giya import store
from giya.adapters import get_business_backend
from giya.exceptions import GiyaError
from giya.models import AccrualRecord
from giya.signals import emit, points_granted

logger = logging.getLogger(__name__)

# Must fit AccrualRecord.amount_spent, conversion_rate and external_ref
AMOUNT_QUANTUM = Decimal("0.01")
MAX_AMOUNT = Decimal(10) ** 10
RATE_QUANTUM = Decimal("0.0001")
MAX_RATE = Decimal(10) ** 8
MAX_EXTERNAL_REF_LENGTH = 100


def compute_points(amount_spent: Decimal, conversion_rate: Decimal) -> int:
    """Whole points earned for amount_spent at conversion_rate."""
    return int((amount_spent / conversion_rate).to_integral_value(rounding=ROUND_FLOOR))


def business_conversion_rate(business_id: str) -> Decimal:
    """
    Look up the conversion rate from the business backend.

    Raises:
        GiyaError: BUSINESS_NOT_FOUND or BUSINESS_INACTIVE
    """
    profile = get_business_backend().get_business(business_id)
    if profile is None:
        raise GiyaError("BUSINESS_NOT_FOUND", business_id=business_id)
    if not profile.is_active:
        raise GiyaError("BUSINESS_INACTIVE", business_id=business_id)
    return profile.conversion_rate


def get_by_ref(external_ref: str) -> AccrualRecord | None:
    """Get accrual by idempotency key."""
    return AccrualRecord.objects.filter(external_ref=external_ref).first()


def accrue(
    account_id: str,
    source_business_id: str,
    amount_spent,
    conversion_rate=None,
    external_ref: str | None = None,
) -> AccrualRecord:
    """
    Grant points for a purchase.

    Args:
        account_id: Purchasing account
        source_business_id: Business where the purchase happened
        amount_spent: Currency amount (Decimal, int, or numeric string)
        conversion_rate: Currency units per point. Looked up through
            BUSINESS_BACKEND when omitted.
        external_ref: Idempotency key (ex: receipt id). Retrying with the
            same key returns the original record without crediting again.

    Returns:
        AccrualRecord (created, or the existing one for external_ref)

    Raises:
        GiyaError: INVALID_AMOUNT, INVALID_CONVERSION_RATE, INVALID_EXTERNAL_REF,
            BUSINESS_NOT_FOUND, BUSINESS_INACTIVE, TRANSACTION_CONFLICT,
            STORE_UNAVAILABLE
    """
    amount = _quantize(amount_spent, AMOUNT_QUANTUM, MAX_AMOUNT, "INVALID_AMOUNT")
    # is_signed() also catches -0.001 rounded to -0.00
    if amount.is_signed():
        raise GiyaError("INVALID_AMOUNT", amount_spent=str(amount_spent))

    if conversion_rate is None:
        conversion_rate = business_conversion_rate(source_business_id)
    rate = _quantize(conversion_rate, RATE_QUANTUM, MAX_RATE, "INVALID_CONVERSION_RATE")
    if rate <= 0:
        raise GiyaError("INVALID_CONVERSION_RATE", conversion_rate=str(conversion_rate))

    external_ref = external_ref or None
    if external_ref is not None and (
        not isinstance(external_ref, str) or len(external_ref) > MAX_EXTERNAL_REF_LENGTH
    ):
        raise GiyaError("INVALID_EXTERNAL_REF", max_length=MAX_EXTERNAL_REF_LENGTH)
    if external_ref:
        existing = get_by_ref(external_ref)
        if existing:
            logger.info("Accrual %s already recorded, skipping", external_ref)
            return existing

    try:
        return store.with_transaction(
            _accrue, account_id, source_business_id, amount, rate, external_ref
        )
    except GiyaError as exc:
        # Concurrent retry with the same key won the insert; its credit stands.
        if exc.code == "DUPLICATE_RECORD" and external_ref:
            existing = get_by_ref(external_ref)
            if existing:
                return existing
        raise


def _accrue(account_id, source_business_id, amount, rate, external_ref) -> AccrualRecord:
    points = compute_points(amount, rate)

    if points > 0:
        balance = store.adjust_balance(account_id, points)
    else:
        balance = store.get_balance(account_id)

    record = store.append_record(
        AccrualRecord(
            account_id=account_id,
            source_business_id=source_business_id,
            amount_spent=amount,
            conversion_rate=rate,
            points_granted=points,
            external_ref=external_ref,
        )
    )

    logger.info(
        "Accrued %d pts to %s from %s (spent %s, balance %d)",
        points, account_id, source_business_id, amount, balance,
    )
    emit(points_granted, sender=AccrualRecord, record=record, balance=balance)
    return record


def _quantize(value, quantum: Decimal, limit: Decimal, error_code: str) -> Decimal:
    """Decimal rounded to the column's scale, or error_code if it does not fit."""
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise GiyaError(error_code, value=str(value))
    if not result.is_finite() or abs(result) >= limit:
        raise GiyaError(error_code, value=str(value))
    result = result.quantize(quantum, rounding=ROUND_HALF_UP)
    if abs(result) >= limit:
        raise GiyaError(error_code, value=str(value))
    return result
