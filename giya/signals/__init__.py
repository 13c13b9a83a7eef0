"""
Giya signals — domain events for external subscribers (notifications,
analytics, timelines).

Emitted signals (all with sender=<model class>):
- points_granted: record=AccrualRecord, balance=int
- redemption_issued: token=RedemptionToken, balance=int
- redemption_consumed: token=RedemptionToken
- redemption_cancelled: token=RedemptionToken, balance=int
- commission_granted: grant=CommissionGrant

Signals are sent after the ledger transaction commits. A failing receiver
is logged and never rolls back the ledger.
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

points_granted = Signal()
redemption_issued = Signal()
redemption_consumed = Signal()
redemption_cancelled = Signal()
commission_granted = Signal()


def emit(signal: Signal, sender, **kwargs) -> None:
    """Send signal once the current transaction commits."""

    def _send():
        for receiver, response in signal.send_robust(sender=sender, **kwargs):
            if isinstance(response, Exception):
                logger.error(
                    "Signal receiver %r failed", receiver, exc_info=response
                )

    transaction.on_commit(_send)
