"""Tests for the accrual service."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from giya import store
from giya.exceptions import GiyaError
from giya.models import Account, AccrualRecord
from giya.services import accrual


pytestmark = pytest.mark.django_db


class TestComputePoints:
    """floor(amount_spent / conversion_rate)."""

    @pytest.mark.parametrize(
        "amount,rate,expected",
        [
            ("250", "100", 2),
            ("99", "100", 0),
            ("100", "100", 1),
            ("0", "100", 0),
            ("99.99", "0.5", 199),
            ("10", "3", 3),
        ],
    )
    def test_floor(self, amount, rate, expected):
        assert accrual.compute_points(Decimal(amount), Decimal(rate)) == expected


class TestAccrue:
    """Tests for accrue()."""

    def test_scenario_a(self):
        """Balance 0, rate 100, spent 250 -> 2 points, balance 2."""
        record = accrual.accrue("CUST-001", "BIZ-001", 250, conversion_rate=100)

        assert record.points_granted == 2
        assert record.amount_spent == Decimal("250")
        assert store.get_balance("CUST-001") == 2

    def test_scenario_e_zero_points_recorded(self, fund):
        """Spent 99 at rate 100 -> record with 0 points, balance unchanged."""
        fund("CUST-001", 10)
        version = Account.objects.get(account_id="CUST-001").version

        record = accrual.accrue("CUST-001", "BIZ-001", 99, conversion_rate=100)

        assert record.points_granted == 0
        assert AccrualRecord.objects.filter(pk=record.pk).exists()
        account = Account.objects.get(account_id="CUST-001")
        assert account.balance == 10
        assert account.version == version

    def test_zero_points_does_not_create_account(self):
        accrual.accrue("CUST-NEW", "BIZ-001", "5.00", conversion_rate=100)
        assert not Account.objects.filter(account_id="CUST-NEW").exists()

    def test_rate_snapshot(self):
        record = accrual.accrue("CUST-001", "BIZ-001", 300, conversion_rate="150")
        record.refresh_from_db()
        assert record.conversion_rate == Decimal("150")
        assert record.points_granted == 2

    def test_rate_from_business_backend(self):
        """Without an explicit rate the business profile is used."""
        record = accrual.accrue("CUST-001", "BIZ-002", 120)
        assert record.points_granted == 2  # BIZ-002 rate is 50

    def test_unknown_business(self):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-UNKNOWN", 100)
        assert exc_info.value.code == "BUSINESS_NOT_FOUND"

    def test_inactive_business(self):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-CLOSED", 100)
        assert exc_info.value.code == "BUSINESS_INACTIVE"

    def test_negative_amount(self):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", -1, conversion_rate=100)
        assert exc_info.value.code == "INVALID_AMOUNT"
        assert AccrualRecord.objects.count() == 0

    @pytest.mark.parametrize("amount", ["abc", None, "NaN", "Infinity"])
    def test_non_numeric_amount(self, amount):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", amount, conversion_rate=100)
        assert exc_info.value.code == "INVALID_AMOUNT"

    @pytest.mark.parametrize("rate", [0, -5, "x"])
    def test_invalid_rate(self, rate):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=rate)
        assert exc_info.value.code == "INVALID_CONVERSION_RATE"


class TestAccrualIdempotency:
    """Retrying with the same external_ref never double-grants."""

    def test_same_ref_returns_original(self):
        first = accrual.accrue("CUST-001", "BIZ-001", 500, conversion_rate=100, external_ref="receipt:1")
        second = accrual.accrue("CUST-001", "BIZ-001", 500, conversion_rate=100, external_ref="receipt:1")

        assert first.pk == second.pk
        assert AccrualRecord.objects.count() == 1
        assert store.get_balance("CUST-001") == 5

    def test_empty_ref_not_deduplicated(self):
        accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=100, external_ref="")
        accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=100, external_ref="")
        assert AccrualRecord.objects.count() == 2
        assert store.get_balance("CUST-001") == 2

    def test_lost_insert_race_rolls_back_credit(self):
        """A concurrent writer inserted the same ref after our pre-check."""
        winner = accrual.accrue("CUST-001", "BIZ-001", 500, conversion_rate=100, external_ref="receipt:race")

        # Pre-check misses (as if the winner had not committed yet), then
        # the fallback lookup finds it.
        with patch.object(accrual, "get_by_ref", side_effect=[None, winner]):
            result = accrual.accrue(
                "CUST-001", "BIZ-001", 500, conversion_rate=100, external_ref="receipt:race"
            )

        assert result.pk == winner.pk
        assert AccrualRecord.objects.count() == 1
        assert store.get_balance("CUST-001") == 5


class TestStorageLimits:
    """Inputs are checked against the columns they are stored in."""

    @pytest.mark.parametrize("amount", [10**30, "10000000000", "9999999999.995"])
    def test_amount_too_large(self, amount):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", amount, conversion_rate=1)
        assert exc_info.value.code == "INVALID_AMOUNT"
        assert store.get_balance("CUST-001") == 0

    def test_largest_amount(self):
        record = accrual.accrue("CUST-001", "BIZ-001", "9999999999.99", conversion_rate="0.0001")
        assert record.points_granted == 99999999999900
        assert store.get_balance("CUST-001") == 99999999999900

    def test_amount_rounded_before_points(self):
        """Points come from the stored (2-decimal) amount."""
        record = accrual.accrue("CUST-001", "BIZ-001", "99.999", conversion_rate=100)

        record.refresh_from_db()
        assert record.amount_spent == Decimal("100.00")
        assert record.points_granted == 1

    def test_tiny_negative_amount(self):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", "-0.001", conversion_rate=100)
        assert exc_info.value.code == "INVALID_AMOUNT"

    @pytest.mark.parametrize("rate", ["0.00001", "100000000"])
    def test_rate_outside_column(self, rate):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=rate)
        assert exc_info.value.code == "INVALID_CONVERSION_RATE"

    def test_external_ref_too_long(self):
        with pytest.raises(GiyaError) as exc_info:
            accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=1, external_ref="r" * 101)
        assert exc_info.value.code == "INVALID_EXTERNAL_REF"
        assert not AccrualRecord.objects.exists()

    def test_external_ref_at_limit(self):
        record = accrual.accrue("CUST-001", "BIZ-001", 100, conversion_rate=1, external_ref="r" * 100)
        assert record.external_ref == "r" * 100
