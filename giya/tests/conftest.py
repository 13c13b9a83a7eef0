"""Pytest fixtures for Giya tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from giya import store
from giya.models import Offer, OfferType


@pytest.fixture
def fund(db):
    """Credit points to an account: fund("CUST-001", 200)."""

    def _fund(account_id: str, points: int) -> int:
        return store.adjust_balance(account_id, points)

    return _fund


@pytest.fixture
def customer(fund):
    """Customer account with 200 points."""
    fund("CUST-001", 200)
    return "CUST-001"


@pytest.fixture
def offer(db):
    """Unlimited 50-point reward at BIZ-001."""
    return Offer.objects.create(
        owning_business_id="BIZ-001",
        offer_type=OfferType.REWARD,
        title="Free Coffee",
        points_required=50,
    )


@pytest.fixture
def limited_offer(db):
    """Discount at BIZ-001 that can be redeemed once."""
    return Offer.objects.create(
        owning_business_id="BIZ-001",
        offer_type=OfferType.DISCOUNT,
        title="20% Off",
        points_required=50,
        discount_percentage=20,
        redemption_limit=1,
    )


@pytest.fixture
def expired_offer(db):
    """Exclusive offer that ended yesterday."""
    return Offer.objects.create(
        owning_business_id="BIZ-001",
        offer_type=OfferType.EXCLUSIVE,
        title="Members Burger",
        points_required=30,
        original_price=250,
        exclusive_price=199,
        validity_end=timezone.now() - timedelta(days=1),
    )
