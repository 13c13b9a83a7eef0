"""
Giya Ledger Store — the only code that mutates ledger state.

Every multi-step operation runs inside with_transaction(). Inside it, all
contended writes are conditional UPDATEs (compare-and-swap), never
read-modify-write:

    adjust_balance()    balance + delta    WHERE balance >= -delta
    claim_offer_unit()  count + 1          WHERE count < limit
    transition_token()  state = to_state   WHERE state = from_state

Append-only rows go through append_record(), which turns unique-constraint
violations into DUPLICATE_RECORD so callers can treat a lost race as
"already done".
"""

import logging
import time

from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import F, Q
from django.utils import timezone

from giya.conf import giya_settings
from giya.exceptions import GiyaError
from giya.models import Account, AccountKind, Offer, RedemptionToken, TokenState

logger = logging.getLogger(__name__)


def with_transaction(fn, *args, **kwargs):
    """
    Run fn(*args, **kwargs) atomically, retrying transient store failures.

    OperationalError (lock timeout, serialization failure) maps to
    TRANSACTION_CONFLICT and InterfaceError (lost connection) to
    STORE_UNAVAILABLE. Both are retried with exponential backoff up to
    TRANSACTION_MAX_ATTEMPTS. GiyaError raised by fn is terminal and
    propagates unchanged after rollback.

    When called inside an outer atomic block nothing is retried: the outer
    transaction is already broken and only its owner can restart it.
    """
    nested = transaction.get_connection().in_atomic_block
    max_attempts = 1 if nested else max(1, giya_settings.TRANSACTION_MAX_ATTEMPTS)
    backoff = giya_settings.TRANSACTION_RETRY_BACKOFF

    for attempt in range(1, max_attempts + 1):
        try:
            with transaction.atomic():
                return fn(*args, **kwargs)
        except OperationalError as exc:
            code, error = "TRANSACTION_CONFLICT", exc
        except InterfaceError as exc:
            code, error = "STORE_UNAVAILABLE", exc

        if attempt < max_attempts:
            delay = backoff * (2 ** (attempt - 1))
            logger.warning(
                "Ledger transaction %s failed (%s), attempt %d/%d, retrying in %.3fs",
                getattr(fn, "__name__", fn), error, attempt, max_attempts, delay,
            )
            time.sleep(delay)

    raise GiyaError(code, attempts=max_attempts) from error


def get_balance(account_id: str) -> int:
    """Current balance, 0 for unknown accounts."""
    balance = (
        Account.objects.filter(account_id=account_id)
        .values_list("balance", flat=True)
        .first()
    )
    return balance or 0


def adjust_balance(
    account_id: str,
    delta: int,
    kind: str = AccountKind.CUSTOMER,
) -> int:
    """
    Apply delta to the account balance and return the new balance.

    Credits create the account on first use. Debits that would make the
    balance negative raise INSUFFICIENT_BALANCE and change nothing.
    MUST be called inside with_transaction().
    """
    if delta == 0:
        return get_balance(account_id)

    if delta > 0:
        Account.objects.get_or_create(account_id=account_id, defaults={"kind": kind})

    updated = Account.objects.filter(
        account_id=account_id,
        balance__gte=-delta,
    ).update(
        balance=F("balance") + delta,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )

    if not updated:
        raise GiyaError(
            "INSUFFICIENT_BALANCE",
            account_id=account_id,
            available=get_balance(account_id),
            requested=-delta,
        )

    return get_balance(account_id)


def append_record(instance):
    """
    Insert an immutable row.

    Runs in its own savepoint so a constraint violation leaves the
    surrounding transaction usable.

    Raises:
        GiyaError: DUPLICATE_RECORD on a uniqueness violation
    """
    try:
        with transaction.atomic():
            instance.save(force_insert=True)
    except IntegrityError as exc:
        raise GiyaError(
            "DUPLICATE_RECORD",
            model=instance._meta.label,
            detail=str(exc),
        ) from exc
    return instance


def claim_offer_unit(offer_id) -> bool:
    """
    Increment redemption_count if the offer still has units left.

    The limit check and the increment are one UPDATE, so two requests
    racing for the last unit cannot both win.
    """
    updated = Offer.objects.filter(
        Q(redemption_limit__isnull=True) | Q(redemption_count__lt=F("redemption_limit")),
        pk=offer_id,
        is_active=True,
    ).update(
        redemption_count=F("redemption_count") + 1,
        updated_at=timezone.now(),
    )
    return updated == 1


def transition_token(token_id: str, from_state: str, to_state: str, **fields) -> bool:
    """Move a token between states. Returns False if another caller won."""
    updated = RedemptionToken.objects.filter(
        token_id=token_id,
        state=from_state,
    ).update(state=to_state, **fields)
    return updated == 1


def count_account_redemptions(account_id: str, offer_id) -> int:
    """Issued or consumed tokens of account_id for offer_id."""
    return RedemptionToken.objects.filter(
        account_id=account_id,
        offer_id=offer_id,
        state__in=(TokenState.ISSUED, TokenState.CONSUMED),
    ).count()
