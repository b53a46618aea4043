from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Protocol, Tuple
from zoneinfo import ZoneInfo

from tokenchart.config import DEFAULT_TZ

logger = logging.getLogger(__name__)

EPOCH = date(1970, 1, 1)

WEEKDAY_BASE = 5000
WEEKEND_BASE = 1500
JITTER = 2500

# (every_nth_ordinal_day, added_value, weekdays_only), checked in order, first match wins
SPIKE_RULES: Tuple[Tuple[int, int, bool], ...] = (
  (37, 45000, False),
  (11, 15000, False),
  (5, 5000, True),
)

MONTHS = ("January", "February", "March", "April", "May", "June",
          "July", "August", "September", "October", "November", "December")
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class InvalidRange(ValueError):
  pass


@dataclass(frozen=True)
class Sample:
  date: date
  value: int
  short_label: str
  long_label: str


Series = Tuple[Sample, ...]


class SampleSource(Protocol):
  def generate(self, days: int) -> Series: ...


def short_label(d: date) -> str:
  return f"{MONTHS[d.month - 1][:3]} {d.day}"


def long_label(d: date) -> str:
  return f"{WEEKDAYS[d.weekday()]}, {MONTHS[d.month - 1]} {d.day}, {d.year}"


def date_seed(d: date) -> int:
  return d.year * 10000 + d.month * 100 + d.day


def ordinal_day(d: date) -> int:
  return (d - EPOCH).days


def is_weekend(d: date) -> bool:
  return d.weekday() >= 5


def spike_for(d: date) -> int:
  ordinal = ordinal_day(d)
  weekend = is_weekend(d)
  for every, amount, weekdays_only in SPIKE_RULES:
    if ordinal % every == 0:
      if weekdays_only and weekend:
        continue
      return amount
  return 0


def usage_for(d: date) -> int:
  rand = (math.sin(date_seed(d)) + 1.0) / 2.0
  base = WEEKEND_BASE if is_weekend(d) else WEEKDAY_BASE
  return base + int(math.floor(rand * JITTER)) + spike_for(d)


def make_sample(d: date) -> Sample:
  return Sample(date=d, value=usage_for(d), short_label=short_label(d), long_label=long_label(d))


def validate_days(days) -> int:
  if isinstance(days, bool) or not isinstance(days, int):
    raise InvalidRange(f"range must be a positive integer number of days, got {days!r}")
  if days <= 0:
    raise InvalidRange(f"range must be positive, got {days}")
  return days


class SampleSeriesGenerator:
  """Deterministic stand-in for a usage metrics backend.

  Every value depends only on its calendar date, so two calls on the same day
  yield identical series.
  """

  def __init__(self, today: Optional[Callable[[], date]] = None, tz: str = DEFAULT_TZ):
    self._tz = ZoneInfo(tz)
    self._today = today or self._wall_clock_today

  def _wall_clock_today(self) -> date:
    return datetime.now(self._tz).date()

  def generate(self, days: int) -> Series:
    days = validate_days(days)
    end = self._today()
    series = tuple(make_sample(end - timedelta(days=i)) for i in range(days - 1, -1, -1))
    logger.debug("generated %d samples %s..%s", days, series[0].date, series[-1].date)
    return series
