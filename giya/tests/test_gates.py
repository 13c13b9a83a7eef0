"""Tests for Giya gates."""

from datetime import datetime, time, timedelta
from datetime import timezone as dt_timezone

import pytest
from django.utils import timezone

from giya.exceptions import GiyaError
from giya.gates import Gates
from giya.models import Offer, RedemptionToken, ScheduleType, TokenState


# Monday 2026-10-19, local time
MONDAY_NOON = timezone.make_aware(datetime(2026, 10, 19, 12, 0))


def make_offer(**kwargs) -> Offer:
    defaults = {"owning_business_id": "BIZ-001", "title": "Offer", "points_required": 10}
    defaults.update(kwargs)
    return Offer(**defaults)


def make_token(**kwargs) -> RedemptionToken:
    defaults = {
        "token_id": "GIYA-test",
        "account_id": "CUST-001",
        "owning_business_id": "BIZ-001",
        "points_debited": 10,
        "state": TokenState.ISSUED,
    }
    defaults.update(kwargs)
    return RedemptionToken(**defaults)


def code_of(fn, *args) -> str:
    with pytest.raises(GiyaError) as exc_info:
        fn(*args)
    return exc_info.value.code


class TestOfferGates:
    """R1-R4."""

    def test_all_pass(self):
        result = Gates.offer_redeemable(make_offer(), MONDAY_NOON)
        assert result.passed
        assert Gates.check_offer_redeemable(make_offer(), MONDAY_NOON)

    def test_inactive(self):
        assert code_of(Gates.offer_active, make_offer(is_active=False)) == "OFFER_INACTIVE"

    def test_validity_window(self):
        offer = make_offer(
            validity_start=MONDAY_NOON - timedelta(days=1),
            validity_end=MONDAY_NOON + timedelta(days=1),
        )
        assert Gates.offer_validity(offer, MONDAY_NOON).passed
        assert code_of(Gates.offer_validity, offer, MONDAY_NOON + timedelta(days=2)) == "OFFER_EXPIRED"
        assert code_of(Gates.offer_validity, offer, MONDAY_NOON - timedelta(days=2)) == "OFFER_EXPIRED"

    def test_validity_end_inclusive(self):
        offer = make_offer(validity_end=MONDAY_NOON)
        assert Gates.offer_validity(offer, MONDAY_NOON).passed

    def test_capacity(self):
        assert Gates.offer_capacity(make_offer(redemption_limit=2, redemption_count=1)).passed
        full = make_offer(redemption_limit=2, redemption_count=2)
        assert code_of(Gates.offer_capacity, full) == "OFFER_EXHAUSTED"
        assert Gates.offer_capacity(make_offer(redemption_count=10_000)).passed

    def test_account_limit(self):
        offer = make_offer(per_account_limit=2)
        assert Gates.offer_account_limit(offer, 1).passed
        assert code_of(Gates.offer_account_limit, offer, 2) == "OFFER_ACCOUNT_LIMIT_REACHED"
        assert Gates.offer_account_limit(make_offer(), 50).passed

    def test_first_failure_wins(self):
        """Inactive and exhausted: R1 is reported."""
        offer = make_offer(is_active=False, redemption_limit=1, redemption_count=1)
        assert code_of(Gates.offer_redeemable, offer, MONDAY_NOON) == "OFFER_INACTIVE"
        assert not Gates.check_offer_redeemable(offer, MONDAY_NOON)


class TestOfferSchedule:
    """R3 schedule variants."""

    def test_day_based(self):
        monday = make_offer(schedule_type=ScheduleType.DAY, active_days=[1])
        sunday = make_offer(schedule_type=ScheduleType.DAY, active_days=[0, 6])
        assert Gates.offer_schedule(monday, MONDAY_NOON).passed
        assert code_of(Gates.offer_schedule, sunday, MONDAY_NOON) == "OFFER_NOT_AVAILABLE_NOW"
        assert Gates.offer_schedule(sunday, MONDAY_NOON - timedelta(days=1)).passed

    def test_time_based(self):
        lunch = make_offer(schedule_type=ScheduleType.TIME, start_time=time(11), end_time=time(14))
        assert Gates.offer_schedule(lunch, MONDAY_NOON).passed
        assert code_of(Gates.offer_schedule, lunch, MONDAY_NOON + timedelta(hours=3)) == (
            "OFFER_NOT_AVAILABLE_NOW"
        )

    def test_time_window_across_midnight(self):
        late = make_offer(schedule_type=ScheduleType.TIME, start_time=time(22), end_time=time(2))
        assert Gates.offer_schedule(late, MONDAY_NOON + timedelta(hours=11)).passed  # 23:00
        assert Gates.offer_schedule(late, MONDAY_NOON + timedelta(hours=13)).passed  # 01:00
        assert code_of(Gates.offer_schedule, late, MONDAY_NOON) == "OFFER_NOT_AVAILABLE_NOW"

    def test_time_and_day(self):
        offer = make_offer(
            schedule_type=ScheduleType.TIME_AND_DAY,
            start_time=time(11),
            end_time=time(14),
            active_days=[1],
        )
        assert Gates.offer_schedule(offer, MONDAY_NOON).passed
        assert not Gates.check_offer_redeemable(offer, MONDAY_NOON + timedelta(days=1))

    def test_schedule_uses_local_time(self):
        """04:00 UTC is 12:00 in Manila."""
        lunch = make_offer(schedule_type=ScheduleType.TIME, start_time=time(11), end_time=time(14))
        utc = datetime(2026, 10, 19, 4, 0, tzinfo=dt_timezone.utc)
        assert Gates.offer_schedule(lunch, utc).passed


class TestTokenGates:
    """T1-T3."""

    def test_usable(self):
        assert Gates.token_usable(make_token(), "BIZ-001", MONDAY_NOON).passed
        assert Gates.check_token_usable(make_token(), "BIZ-001", MONDAY_NOON)

    def test_business_mismatch(self):
        assert code_of(Gates.token_business_match, make_token(), "BIZ-002") == "TOKEN_BUSINESS_MISMATCH"

    @pytest.mark.parametrize("state", [TokenState.CONSUMED, TokenState.CANCELLED])
    def test_not_issued(self, state):
        assert code_of(Gates.token_issued, make_token(state=state)) == "TOKEN_ALREADY_CONSUMED"

    def test_expiry(self):
        token = make_token(expires_at=MONDAY_NOON)
        assert Gates.token_not_expired(token, MONDAY_NOON - timedelta(seconds=1)).passed
        assert code_of(Gates.token_not_expired, token, MONDAY_NOON + timedelta(seconds=1)) == "TOKEN_EXPIRED"

    def test_no_expiry(self):
        assert Gates.token_not_expired(make_token(), MONDAY_NOON + timedelta(days=3650)).passed

    def test_order(self):
        """Business is checked before state, state before expiry."""
        token = make_token(state=TokenState.CONSUMED, expires_at=MONDAY_NOON - timedelta(days=1))
        assert code_of(Gates.token_usable, token, "BIZ-002", MONDAY_NOON) == "TOKEN_BUSINESS_MISMATCH"
        assert code_of(Gates.token_usable, token, "BIZ-001", MONDAY_NOON) == "TOKEN_ALREADY_CONSUMED"
        assert not Gates.check_token_usable(token, "BIZ-001", MONDAY_NOON)
