"""Time window type and the 0-100 slider to date mapping."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Tuple

import pandas as pd

from .utils.exceptions import InvalidRangeError

logger = logging.getLogger(__name__)

SLIDER_MIN = 0
SLIDER_MAX = 100


def _naive_utc(value: datetime) -> datetime:
    # aware timestamps are compared as naive UTC
    if value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise TypeError(f'Expected a date or datetime, got {type(value).__name__}')


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval [start, end]; plain dates are promoted to midnight,
    timezone-aware bounds are converted to naive UTC."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, 'start', _as_datetime(self.start))
        object.__setattr__(self, 'end', _as_datetime(self.end))
        if self.start > self.end:
            raise InvalidRangeError(f'Time window start {self.start} is after end {self.end}')

    def contains(self, moment: date | datetime | None) -> bool:
        """
        Whether ``moment`` falls inside the window.

        A missing timestamp (None or NaT) is always inside. A plain ``date``
        is compared against the window's calendar dates, a ``datetime``
        against the full window, after converting aware values to naive UTC.
        """
        if moment is None or pd.isna(moment):
            return True
        if isinstance(moment, datetime):
            return self.start <= _naive_utc(moment) <= self.end
        return self.start.date() <= moment <= self.end.date()

    def as_tuple(self) -> Tuple[datetime, datetime]:
        return self.start, self.end


def _check_percent(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRangeError(f'{name} must be a number, got {value!r}')
    if not math.isfinite(number) or number < SLIDER_MIN or number > SLIDER_MAX:
        raise InvalidRangeError(f'{name} must be within [{SLIDER_MIN}, {SLIDER_MAX}], got {value!r}')
    return number


def map_slider_to_date_range(
    slider_low: float,
    slider_high: float,
    bounds: TimeWindow | Tuple[date | datetime, date | datetime],
) -> Tuple[datetime, datetime]:
    """
    Map a pair of slider percentages onto the bounds by linear interpolation

    Args:
    slider_low (float): Lower handle, 0 to 100
    slider_high (float): Upper handle, slider_low to 100
    bounds (TimeWindow | tuple): Full date range the slider spans

    Returns:
    tuple: (start, end) datetimes with start <= end

    Raises:
    InvalidRangeError: Percentages out of order, out of [0, 100] or not finite
    """
    low = _check_percent('slider_low', slider_low)
    high = _check_percent('slider_high', slider_high)
    if low > high:
        logger.warning(f'Slider handles out of order: {slider_low} > {slider_high}')
        raise InvalidRangeError(f'slider_low ({slider_low}) is greater than slider_high ({slider_high})')
    if not isinstance(bounds, TimeWindow):
        bounds = TimeWindow(*bounds)

    span = bounds.end - bounds.start
    start = bounds.start + span * (low / SLIDER_MAX)
    end = bounds.start + span * (high / SLIDER_MAX)
    return start, end


__all__ = ['TimeWindow', 'map_slider_to_date_range', 'SLIDER_MIN', 'SLIDER_MAX']
