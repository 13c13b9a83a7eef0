"""Giya services.

One module per ledger operation. Each public function runs its whole
mutation inside giya.store.with_transaction():
- accrual: purchase -> AccrualRecord + balance credit
- redemption: offer -> balance debit + RedemptionToken (and cancellation)
- validation: RedemptionToken issued -> consumed
- commission: AccrualRecord -> CommissionGrant for the referrer
- summary: read-only balances, history, and analytics
"""

from giya.services import accrual
from giya.services import redemption
from giya.services import validation
from giya.services import commission
from giya.services import summary

__all__ = ["accrual", "redemption", "validation", "commission", "summary"]
