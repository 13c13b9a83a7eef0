"""Summary service - read-only balances, history, and analytics."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.db.models import Count, Sum

from giya import store
from giya.models import AccrualRecord, CommissionGrant, RedemptionToken, TokenState

_COMMITTED_STATES = (TokenState.ISSUED, TokenState.CONSUMED)


@dataclass(frozen=True)
class AccountSummary:
    """Points position of one account."""

    account_id: str
    balance: int
    total_earned: int
    total_commission: int
    total_redeemed: int  # issued + consumed tokens
    total_refunded: int  # cancelled tokens
    accrual_count: int
    redemption_count: int


@dataclass(frozen=True)
class BusinessSummary:
    """Points activity at one business."""

    business_id: str
    total_amount_spent: Decimal
    total_points_awarded: int
    total_points_redeemed: int
    redemptions_validated: int
    unique_customers: int
    accrual_count: int
    average_amount_spent: Decimal
    average_points_per_accrual: Decimal


@dataclass(frozen=True)
class LedgerEntry:
    """One line of an account's history."""

    kind: str  # accrual, commission, redemption, refund
    reference: str
    points: int  # signed
    occurred_at: datetime
    business_id: str = ""


def account_summary(account_id: str) -> AccountSummary:
    """Totals behind an account's balance."""
    accruals = AccrualRecord.objects.filter(account_id=account_id).aggregate(
        total=Sum("points_granted"), count=Count("pk")
    )
    commissions = CommissionGrant.objects.filter(referrer_account_id=account_id).aggregate(
        total=Sum("amount")
    )
    tokens = RedemptionToken.objects.filter(account_id=account_id)
    redeemed = tokens.filter(state__in=_COMMITTED_STATES).aggregate(
        total=Sum("points_debited"), count=Count("pk")
    )
    refunded = tokens.filter(state=TokenState.CANCELLED).aggregate(total=Sum("points_debited"))

    return AccountSummary(
        account_id=account_id,
        balance=store.get_balance(account_id),
        total_earned=accruals["total"] or 0,
        total_commission=commissions["total"] or 0,
        total_redeemed=redeemed["total"] or 0,
        total_refunded=refunded["total"] or 0,
        accrual_count=accruals["count"],
        redemption_count=redeemed["count"],
    )


def business_summary(business_id: str) -> BusinessSummary:
    """Accrual and redemption totals for a business."""
    accruals = AccrualRecord.objects.filter(source_business_id=business_id).aggregate(
        amount=Sum("amount_spent"),
        points=Sum("points_granted"),
        count=Count("pk"),
        customers=Count("account_id", distinct=True),
    )
    tokens = RedemptionToken.objects.filter(owning_business_id=business_id)
    redeemed = tokens.filter(state__in=_COMMITTED_STATES).aggregate(total=Sum("points_debited"))

    count = accruals["count"]
    amount = accruals["amount"] or Decimal("0")
    points = accruals["points"] or 0

    return BusinessSummary(
        business_id=business_id,
        total_amount_spent=amount,
        total_points_awarded=points,
        total_points_redeemed=redeemed["total"] or 0,
        redemptions_validated=tokens.filter(state=TokenState.CONSUMED).count(),
        unique_customers=accruals["customers"],
        accrual_count=count,
        average_amount_spent=amount / count if count else Decimal("0"),
        average_points_per_accrual=Decimal(points) / count if count else Decimal("0"),
    )


def history(account_id: str, limit: int = 50) -> list[LedgerEntry]:
    """Merged accrual/commission/redemption history, most recent first."""
    entries = [
        LedgerEntry(
            kind="accrual",
            reference=str(r.pk),
            points=r.points_granted,
            occurred_at=r.created_at,
            business_id=r.source_business_id,
        )
        for r in AccrualRecord.objects.filter(account_id=account_id)[:limit]
    ]
    entries += [
        LedgerEntry(
            kind="commission",
            reference=str(g.pk),
            points=g.amount,
            occurred_at=g.created_at,
            business_id=g.source_record.source_business_id,
        )
        for g in CommissionGrant.objects.filter(
            referrer_account_id=account_id
        ).select_related("source_record")[:limit]
    ]
    for t in RedemptionToken.objects.filter(account_id=account_id)[:limit]:
        entries.append(
            LedgerEntry(
                kind="redemption",
                reference=t.token_id,
                points=-t.points_debited,
                occurred_at=t.issued_at,
                business_id=t.owning_business_id,
            )
        )
        if t.state == TokenState.CANCELLED:
            entries.append(
                LedgerEntry(
                    kind="refund",
                    reference=t.token_id,
                    points=t.points_debited,
                    occurred_at=t.cancelled_at or t.issued_at,
                    business_id=t.owning_business_id,
                )
            )

    entries.sort(key=lambda e: e.occurred_at, reverse=True)
    return entries[:limit]
