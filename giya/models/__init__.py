"""Giya models.

Ledger records are append-only (AccrualRecord, CommissionGrant) or
transition exactly once (RedemptionToken). Account balances change only
through giya.store.
"""

from giya.models.account import Account, AccountKind
from giya.models.accrual import AccrualRecord
from giya.models.offer import Offer, OfferType, ScheduleType
from giya.models.redemption import RedemptionToken, TokenState
from giya.models.commission import CommissionGrant

__all__ = [
    "Account",
    "AccountKind",
    "AccrualRecord",
    "Offer",
    "OfferType",
    "ScheduleType",
    "RedemptionToken",
    "TokenState",
    "CommissionGrant",
]
