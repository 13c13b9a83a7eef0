"""Tests for management commands."""

from datetime import timedelta
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.utils import timezone

from giya import store
from giya.models import RedemptionToken, TokenState
from giya.services import redemption


pytestmark = pytest.mark.django_db


@pytest.fixture
def expired_token(customer, offer):
    token = redemption.issue(customer, offer.pk)
    RedemptionToken.objects.filter(pk=token.pk).update(expires_at=timezone.now() - timedelta(hours=1))
    return token


class TestExpireRedemptions:
    def test_cancels_and_refunds(self, customer, expired_token, offer):
        live = redemption.issue(customer, offer.pk)
        out = StringIO()

        call_command("giya_expire_redemptions", stdout=out)

        expired_token.refresh_from_db()
        live.refresh_from_db()
        assert expired_token.state == TokenState.CANCELLED
        assert expired_token.cancel_reason == "expired"
        assert live.state == TokenState.ISSUED
        assert store.get_balance(customer) == 150
        assert "Cancelled 1 expired redemptions." in out.getvalue()

    def test_dry_run(self, customer, expired_token):
        out = StringIO()

        call_command("giya_expire_redemptions", "--dry-run", stdout=out)

        expired_token.refresh_from_db()
        assert expired_token.state == TokenState.ISSUED
        assert store.get_balance(customer) == 150
        assert "1 expired redemptions." in out.getvalue()

    def test_skips_token_consumed_meanwhile(self, customer, expired_token):
        """Token consumed between the query and the cancel is skipped."""
        out, err = StringIO(), StringIO()
        RedemptionToken.objects.filter(pk=expired_token.pk).update(state=TokenState.CONSUMED)

        with patch.object(redemption, "expired_tokens", return_value=RedemptionToken.objects.filter(pk=expired_token.pk)):
            call_command("giya_expire_redemptions", stdout=out, stderr=err)

        assert "TOKEN_ALREADY_CONSUMED" in err.getvalue()
        assert "Cancelled 0 expired redemptions." in out.getvalue()
        assert store.get_balance(customer) == 150

    def test_nothing_to_do(self, db):
        out = StringIO()
        call_command("giya_expire_redemptions", stdout=out)
        assert "Cancelled 0 expired redemptions." in out.getvalue()
