from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

import pandas as pd
from pandas.tseries.holiday import USFederalHolidayCalendar
from pandas.tseries.offsets import BDay, CustomBusinessDay

HOLIDAY_RULES = ("none", "us_federal")


def as_date(value) -> date:
    """
    Normalize date-like input (date, datetime, Timestamp, 'YYYY-MM-DD') to a
    plain datetime.date. Any time component is dropped.
    """
    if value is None:
        raise ValueError("date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    ts = pd.to_datetime(value)
    if pd.isna(ts):
        raise ValueError(f"Could not parse date: {value!r}")
    return ts.date()


class BusinessCalendar:
    """
    Business-day arithmetic for the backward walk.

    holidays="none" skips weekends only (the spreadsheet WORKDAY convention);
    holidays="us_federal" also skips US federal holidays.
    """

    def __init__(
        self,
        holidays: str = "none",
        today_fn: Optional[Callable[[], date]] = None,
    ) -> None:
        if holidays not in HOLIDAY_RULES:
            raise ValueError(f"holidays must be one of {HOLIDAY_RULES}, got {holidays!r}")
        self.holidays = holidays
        self._today_fn = today_fn or date.today

        if holidays == "us_federal":
            self._offset = CustomBusinessDay(calendar=USFederalHolidayCalendar())
        else:
            self._offset = BDay()

    def today(self) -> date:
        return as_date(self._today_fn())

    def previous_business_day(self, d) -> date:
        """Closest business day strictly before d."""
        ts = pd.Timestamp(as_date(d))
        return (ts - self._offset).date()

    def is_business_day(self, d) -> bool:
        ts = pd.Timestamp(as_date(d))
        return bool(self._offset.is_on_offset(ts))
