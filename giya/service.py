"""
Giya public API.

CORE (ledger operations):
    LedgerService.accrue(...)              - Grant points for a purchase
    LedgerService.issue_redemption(...)    - Spend points on an offer
    LedgerService.validate_redemption(...) - Consume a redemption token
    LedgerService.propagate_commission(...) - Credit a referrer

CONVENIENCE (helpers):
    LedgerService.process_receipt(...)     - Accrue + commission in one call
    LedgerService.cancel_redemption(...)   - Refund an issued redemption
    LedgerService.lookup_redemption(...)   - Preview a token
    LedgerService.get_balance(...)         - Current balance
    LedgerService.get_summary(...)         - Balance breakdown
    LedgerService.get_history(...)         - Account history
    LedgerService.get_business_summary(...) - Business analytics
"""

import logging
from dataclasses import dataclass

from giya import store
from giya.adapters import get_referral_backend
from giya.models import AccrualRecord, CommissionGrant, RedemptionToken
from giya.services import accrual, commission, redemption, summary, validation

logger = logging.getLogger(__name__)


@dataclass
class ReceiptResult:
    """Outcome of process_receipt()."""

    record: AccrualRecord
    commission: CommissionGrant | None = None

    @property
    def points_granted(self) -> int:
        return self.record.points_granted


class LedgerService:
    """
    Giya public API.

    Uses @classmethod for extensibility. Every mutating method is one
    atomic ledger transaction; errors are raised as GiyaError.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def accrue(
        cls,
        account_id: str,
        business_id: str,
        amount_spent,
        conversion_rate=None,
        external_ref: str | None = None,
    ) -> AccrualRecord:
        """Grant points for a purchase. See giya.services.accrual.accrue."""
        return accrual.accrue(
            account_id,
            business_id,
            amount_spent,
            conversion_rate=conversion_rate,
            external_ref=external_ref,
        )

    @classmethod
    def issue_redemption(cls, account_id: str, offer_id) -> RedemptionToken:
        """Debit points and issue a token. See giya.services.redemption.issue."""
        return redemption.issue(account_id, offer_id)

    @classmethod
    def validate_redemption(
        cls,
        token_id: str,
        business_id: str,
        validated_by: str = "",
    ) -> RedemptionToken:
        """Consume a token. See giya.services.validation.validate."""
        return validation.validate(token_id, business_id, validated_by=validated_by)

    @classmethod
    def propagate_commission(
        cls,
        record: AccrualRecord,
        referrer_account_id: str,
        commission_rate=None,
    ) -> CommissionGrant:
        """Credit a referrer. See giya.services.commission.propagate."""
        return commission.propagate(record, referrer_account_id, commission_rate)

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def process_receipt(
        cls,
        account_id: str,
        business_id: str,
        amount_spent,
        external_ref: str | None = None,
        conversion_rate=None,
    ) -> ReceiptResult:
        """
        Accrue points for a receipt, then pay the referrer if there is one.

        Accrual and commission are separate transactions. Both are
        idempotent, so calling again with the same external_ref after a
        crash completes whatever was missing without double-granting.

        Args:
            account_id: Purchasing account
            business_id: Business on the receipt
            amount_spent: Receipt total
            external_ref: Receipt id (idempotency key)
            conversion_rate: Override the business's rate

        Returns:
            ReceiptResult with the accrual and the commission (if any)
        """
        record = accrual.accrue(
            account_id,
            business_id,
            amount_spent,
            conversion_rate=conversion_rate,
            external_ref=external_ref,
        )

        backend = get_referral_backend()
        if backend is None:
            return ReceiptResult(record=record)

        referral = backend.resolve_referrer(account_id, business_id)
        if referral is None:
            return ReceiptResult(record=record)
        if referral.referrer_account_id == account_id:
            logger.warning("Ignoring self-referral for %s at %s", account_id, business_id)
            return ReceiptResult(record=record)

        grant = commission.propagate(
            record,
            referral.referrer_account_id,
            referral.commission_rate,
        )
        return ReceiptResult(record=record, commission=grant)

    @classmethod
    def cancel_redemption(
        cls,
        token_id: str,
        reason: str = "",
        account_id: str | None = None,
    ) -> RedemptionToken:
        """Refund an issued token. See giya.services.redemption.cancel."""
        return redemption.cancel(token_id, reason=reason, account_id=account_id)

    @classmethod
    def lookup_redemption(cls, token_id: str, business_id: str) -> RedemptionToken:
        """Preview a token without consuming it."""
        return validation.lookup(token_id, business_id)

    @classmethod
    def get_balance(cls, account_id: str) -> int:
        """Current balance. Returns 0 for unknown accounts."""
        return store.get_balance(account_id)

    @classmethod
    def get_summary(cls, account_id: str) -> summary.AccountSummary:
        """Balance with earned/commission/redeemed totals."""
        return summary.account_summary(account_id)

    @classmethod
    def get_history(cls, account_id: str, limit: int = 50) -> list[summary.LedgerEntry]:
        """Account history, most recent first."""
        return summary.history(account_id, limit=limit)

    @classmethod
    def get_business_summary(cls, business_id: str) -> summary.BusinessSummary:
        """Accrual and redemption totals for one business."""
        return summary.business_summary(business_id)
