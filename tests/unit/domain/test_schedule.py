"""Unit tests for subscription due-date rules"""

import pytest
from datetime import date, datetime, timedelta
from src.domain.schedule import is_due, is_expired, select_due, is_final_delivery
from src.domain.subscription import SubscriptionFrequency, SubscriptionStatus
from tests.fixtures.factories import make_subscription

START = date(2024, 3, 1)


class TestFrequency:
    """Test cadence counted from start_date"""

    def test_daily_is_due_every_day(self):
        subscription = make_subscription(frequency=SubscriptionFrequency.DAILY, start_date=START)

        due_days = [START + timedelta(days=n) for n in range(10) if is_due(subscription, START + timedelta(days=n))]

        assert len(due_days) == 10

    def test_alternate_days_from_start(self):
        """Test due on start, start+2, start+4; not on start+1, start+3"""
        subscription = make_subscription(frequency=SubscriptionFrequency.ALTERNATE_DAYS, start_date=START)

        assert is_due(subscription, START)
        assert not is_due(subscription, START + timedelta(days=1))
        assert is_due(subscription, START + timedelta(days=2))
        assert not is_due(subscription, START + timedelta(days=3))
        assert is_due(subscription, START + timedelta(days=4))

    def test_weekly_on_start_weekday(self):
        subscription = make_subscription(frequency=SubscriptionFrequency.WEEKLY, start_date=START)

        due_days = [n for n in range(21) if is_due(subscription, START + timedelta(days=n))]

        assert due_days == [0, 7, 14]
        assert all((START + timedelta(days=n)).weekday() == START.weekday() for n in due_days)

    def test_time_of_day_is_ignored(self):
        subscription = make_subscription(frequency=SubscriptionFrequency.ALTERNATE_DAYS, start_date=START)

        assert is_due(subscription, datetime(2024, 3, 3, 23, 59))
        assert not is_due(subscription, datetime(2024, 3, 2, 0, 1))


class TestWindowAndStatus:
    """Test start/end boundaries and status gating"""

    def test_due_on_start_date(self):
        assert is_due(make_subscription(start_date=START), START)

    def test_not_due_before_start(self):
        assert not is_due(make_subscription(start_date=START), START - timedelta(days=1))

    def test_end_date_is_inclusive(self):
        subscription = make_subscription(start_date=START, end_date=date(2024, 3, 10))

        assert is_due(subscription, date(2024, 3, 10))
        assert not is_due(subscription, date(2024, 3, 11))

    @pytest.mark.parametrize(
        "status",
        [
            SubscriptionStatus.PENDING,
            SubscriptionStatus.PAUSED,
            SubscriptionStatus.COMPLETED,
            SubscriptionStatus.CANCELLED,
        ],
    )
    def test_only_active_subscriptions_are_due(self, status):
        subscription = make_subscription(status=status, start_date=START)

        assert not is_due(subscription, START)

    def test_paused_with_lapsed_window_is_not_due(self):
        """Test PAUSED is never due even after paused_until"""
        subscription = make_subscription(
            status=SubscriptionStatus.PAUSED, start_date=START, paused_until=date(2024, 3, 5)
        )

        assert not is_due(subscription, date(2024, 3, 20))


class TestSelectDue:

    def test_select_due_preserves_input_order(self):
        subscriptions = [
            make_subscription("sub_a", frequency=SubscriptionFrequency.DAILY),
            make_subscription("sub_b", frequency=SubscriptionFrequency.ALTERNATE_DAYS),
            make_subscription("sub_c", status=SubscriptionStatus.PAUSED, paused_until=date(2024, 3, 9)),
            make_subscription("sub_d", frequency=SubscriptionFrequency.WEEKLY),
        ]

        due = select_due(date(2024, 3, 8), subscriptions)

        assert [s.id for s in due] == ["sub_a", "sub_d"]

    def test_is_final_delivery(self):
        subscription = make_subscription(end_date=date(2024, 3, 10))

        assert is_final_delivery(subscription, date(2024, 3, 10))
        assert not is_final_delivery(subscription, date(2024, 3, 9))
        assert not is_final_delivery(make_subscription(end_date=None), date(2024, 3, 10))


class TestExpiry:
    """Test detection of subscriptions with no delivery left"""

    def test_off_cadence_end_date_expires_on_end_date(self):
        """
        Given a weekly subscription from 2024-01-01 ending 2024-01-10
        When 2024-01-10 (not a delivery day) is checked
        Then the subscription is expired
        """
        subscription = make_subscription(
            frequency=SubscriptionFrequency.WEEKLY,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 10),
        )

        assert not is_expired(subscription, date(2024, 1, 9))
        assert is_expired(subscription, date(2024, 1, 10))
        assert is_expired(subscription, date(2024, 1, 20))

    def test_due_on_end_date_is_not_expired(self):
        subscription = make_subscription(start_date=START, end_date=date(2024, 3, 10))

        assert not is_expired(subscription, date(2024, 3, 10))
        assert is_expired(subscription, date(2024, 3, 11))

    def test_open_ended_and_paused_never_expire(self):
        assert not is_expired(make_subscription(end_date=None), date(2030, 1, 1))
        paused = make_subscription(
            status=SubscriptionStatus.PAUSED, end_date=date(2024, 3, 5), paused_until=date(2024, 3, 20)
        )
        assert not is_expired(paused, date(2024, 3, 10))
