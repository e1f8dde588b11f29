"""Due-date rules for subscriptions

Pure functions: no I/O and no status changes. Pause expiry is handled by
the caller (auto-resume) before selection runs, so a PAUSED subscription
is never due here regardless of its paused_until date.
"""

from datetime import date, datetime
from typing import Iterable, List, Union
from src.domain.subscription import Subscription, SubscriptionFrequency, SubscriptionStatus

DateLike = Union[date, datetime]

FREQUENCY_INTERVAL_DAYS = {
    SubscriptionFrequency.DAILY: 1,
    SubscriptionFrequency.ALTERNATE_DAYS: 2,
    SubscriptionFrequency.WEEKLY: 7,
}


def as_calendar_date(value: DateLike) -> date:
    """Drop any time-of-day component"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_since_start(subscription: Subscription, reference_date: DateLike) -> int:
    return (as_calendar_date(reference_date) - as_calendar_date(subscription.start_date)).days


def in_delivery_window(subscription: Subscription, reference_date: DateLike) -> bool:
    """start_date <= reference_date <= end_date (open-ended when end_date is None)"""
    reference_date = as_calendar_date(reference_date)
    if reference_date < as_calendar_date(subscription.start_date):
        return False
    if subscription.end_date is not None and reference_date > as_calendar_date(subscription.end_date):
        return False
    return True


def matches_frequency(subscription: Subscription, reference_date: DateLike) -> bool:
    interval = FREQUENCY_INTERVAL_DAYS[SubscriptionFrequency(subscription.frequency)]
    return days_since_start(subscription, reference_date) % interval == 0


def is_due(subscription: Subscription, reference_date: DateLike) -> bool:
    """True when the subscription needs a delivery on reference_date"""
    if SubscriptionStatus(subscription.status) != SubscriptionStatus.ACTIVE:
        return False
    if not in_delivery_window(subscription, reference_date):
        return False
    return matches_frequency(subscription, reference_date)


def select_due(reference_date: DateLike, subscriptions: Iterable[Subscription]) -> List[Subscription]:
    """Subscriptions requiring a delivery on reference_date, input order preserved"""
    return [s for s in subscriptions if is_due(s, reference_date)]


def is_final_delivery(subscription: Subscription, reference_date: DateLike) -> bool:
    return (
        subscription.end_date is not None
        and as_calendar_date(subscription.end_date) == as_calendar_date(reference_date)
    )


def is_expired(subscription: Subscription, reference_date: DateLike) -> bool:
    """
    ACTIVE subscription with no delivery left on or after reference_date

    Covers end dates that fall between two cadence days and end dates
    passed while no run happened. A subscription due on its end_date is
    not expired there; it completes once that final order exists.
    """
    if SubscriptionStatus(subscription.status) != SubscriptionStatus.ACTIVE:
        return False
    if subscription.end_date is None:
        return False
    if as_calendar_date(subscription.end_date) > as_calendar_date(reference_date):
        return False
    return not is_due(subscription, reference_date)
