"""Date-range resolution for `is_within` predicates.

Windows are computed against a reference instant `now` on a LocalCalendar,
so day, week and month boundaries follow the configured zone and first weekday.
"""

from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from stickytodo.local_calendar import LocalCalendar, get_calendar
from stickytodo.models.filter_rule import DateRange

_TRAILING_DAYS = {DateRange.LAST_7_DAYS: 7, DateRange.LAST_30_DAYS: 30}
_LEADING_DAYS = {DateRange.NEXT_7_DAYS: 7, DateRange.NEXT_30_DAYS: 30}


def is_within(
    instant: datetime,
    token: DateRange,
    now: Optional[datetime] = None,
    calendar: Optional[LocalCalendar] = None,
) -> bool:
    """Check whether `instant` falls inside the named window around `now`.

    Args:
        instant: Date being tested
        token: Named relative window
        now: Reference instant (defaults to the calendar's current time)
        calendar: Calendar supplying zone and week start

    Returns:
        True if the instant lies inside the window
    """
    cal = get_calendar(calendar)
    ref = cal.resolve_now(now)
    value = cal.localize(instant)
    day = value.date()
    today = ref.date()

    if token == DateRange.TODAY:
        return day == today
    if token == DateRange.TOMORROW:
        return day == today + timedelta(days=1)
    if token in (DateRange.THIS_WEEK, DateRange.NEXT_WEEK):
        start = cal.start_of_week(ref)
        if token == DateRange.NEXT_WEEK:
            start += timedelta(days=7)
        return start <= day < start + timedelta(days=7)
    if token == DateRange.THIS_MONTH:
        return (day.year, day.month) == (today.year, today.month)
    if token == DateRange.NEXT_MONTH:
        following = today + relativedelta(months=1)
        return (day.year, day.month) == (following.year, following.month)
    # Compare as timestamps so the repeated DST hour keeps its order.
    at = value.timestamp()
    moment = ref.timestamp()
    if token == DateRange.PAST:
        return at < moment
    if token == DateRange.FUTURE:
        return at > moment
    if token in _TRAILING_DAYS:
        return (ref - timedelta(days=_TRAILING_DAYS[token])).timestamp() <= at <= moment
    if token in _LEADING_DAYS:
        return moment <= at <= (ref + timedelta(days=_LEADING_DAYS[token])).timestamp()
    return False
