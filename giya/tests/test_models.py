"""Tests for Giya models and database constraints."""

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from giya.models import (
    Account,
    AccrualRecord,
    CommissionGrant,
    Offer,
    OfferType,
    RedemptionToken,
    TokenState,
)


pytestmark = pytest.mark.django_db


class TestAccount:
    def test_str(self):
        account = Account.objects.create(account_id="CUST-001", balance=12)
        assert str(account) == "CUST-001: 12pts"

    def test_negative_balance_rejected(self):
        account = Account.objects.create(account_id="CUST-001")
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Account.objects.filter(pk=account.pk).update(balance=-1)


class TestOffer:
    def test_defaults(self, offer):
        assert offer.offer_type == OfferType.REWARD
        assert offer.redemption_count == 0
        assert offer.remaining is None
        assert not offer.is_exhausted
        assert offer.active_days == []

    def test_remaining(self, limited_offer):
        assert limited_offer.remaining == 1
        limited_offer.redemption_count = 1
        assert limited_offer.remaining == 0
        assert limited_offer.is_exhausted

    def test_points_required_positive(self):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Offer.objects.create(owning_business_id="BIZ-001", title="Free", points_required=0)

    def test_count_cannot_exceed_limit(self, limited_offer):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Offer.objects.filter(pk=limited_offer.pk).update(redemption_count=2)


class TestLedgerRows:
    def test_external_ref_unique(self):
        fields = {
            "account_id": "CUST-001",
            "source_business_id": "BIZ-001",
            "amount_spent": Decimal("1"),
            "conversion_rate": Decimal("1"),
            "points_granted": 1,
        }
        AccrualRecord.objects.create(external_ref="R-1", **fields)
        AccrualRecord.objects.create(external_ref=None, **fields)
        AccrualRecord.objects.create(external_ref=None, **fields)
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                AccrualRecord.objects.create(external_ref="R-1", **fields)

    def test_one_grant_per_accrual(self):
        record = AccrualRecord.objects.create(
            account_id="CUST-001",
            source_business_id="BIZ-001",
            amount_spent=Decimal("100"),
            conversion_rate=Decimal("1"),
            points_granted=100,
        )
        CommissionGrant.objects.create(
            referrer_account_id="INF-001", source_record=record, commission_rate=Decimal("0.1"), amount=10
        )
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                CommissionGrant.objects.create(
                    referrer_account_id="INF-002",
                    source_record=record,
                    commission_rate=Decimal("0.1"),
                    amount=10,
                )

    def test_token_id_unique(self, offer):
        fields = {
            "token_id": "GIYA-same",
            "account_id": "CUST-001",
            "offer": offer,
            "owning_business_id": "BIZ-001",
            "points_debited": 50,
        }
        token = RedemptionToken.objects.create(**fields)
        assert token.state == TokenState.ISSUED
        assert not token.is_expired()
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                RedemptionToken.objects.create(**fields)
