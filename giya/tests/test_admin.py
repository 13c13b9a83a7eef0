"""Tests for admin display helpers and permissions."""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from giya.admin import AccrualRecordAdmin, OfferAdmin, RedemptionTokenAdmin
from giya.models import AccrualRecord, Offer, RedemptionToken, TokenState


def test_ledger_rows_are_read_only():
    request = RequestFactory().get("/")
    ledger_admin = RedemptionTokenAdmin(RedemptionToken, admin.site)
    assert not ledger_admin.has_add_permission(request)
    assert not ledger_admin.has_change_permission(request)
    assert not ledger_admin.has_delete_permission(request)


def test_state_badge():
    ledger_admin = RedemptionTokenAdmin(RedemptionToken, admin.site)
    html = ledger_admin.state_badge(RedemptionToken(state=TokenState.CONSUMED))
    assert "#198754" in html
    assert "Consumed" in html


def test_points_display():
    ledger_admin = AccrualRecordAdmin(AccrualRecord, admin.site)
    assert "+5" in ledger_admin.points_display(AccrualRecord(points_granted=5))
    assert ledger_admin.points_display(AccrualRecord(points_granted=0)) == 0


@pytest.mark.parametrize("limit,expected", [(None, "3 / ∞"), (10, "3 / 10")])
def test_offer_usage(limit, expected):
    offer_admin = OfferAdmin(Offer, admin.site)
    assert offer_admin.usage(Offer(redemption_count=3, redemption_limit=limit)) == expected
