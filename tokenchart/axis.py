from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from tokenchart.utils import clean_float, nice_step

TARGET_INTERVALS = 4

# Used when every sample is zero: 0, 1250, 2500, 3750, 5000
DEFAULT_NICE_MAX = 5000.0
DEFAULT_STEP = 1250.0


@dataclass(frozen=True)
class AxisSpec:
  nice_max: float
  step: float

  @property
  def intervals(self) -> int:
    return int(round(self.nice_max / self.step))

  @property
  def tick_count(self) -> int:
    return self.intervals + 1


def compute_axis(max_value: float) -> AxisSpec:
  """
  Nice axis bound for a series maximum.
  Integer inputs give an exact multiple (nice_max % step == 0); for fractional
  inputs nice_max / step is a whole number up to float rounding, so compare
  through AxisSpec.intervals rather than with %.
  """
  if max_value is None or not math.isfinite(max_value) or max_value < 0:
    raise ValueError(f"max_value must be a finite non-negative number, got {max_value!r}")
  if max_value == 0:
    return AxisSpec(nice_max=DEFAULT_NICE_MAX, step=DEFAULT_STEP)

  step = nice_step(max_value / TARGET_INTERVALS)
  nice_max = clean_float(math.ceil(clean_float(max_value / step)) * step)
  if nice_max < max_value:
    nice_max = clean_float(nice_max + step)
  return AxisSpec(nice_max=nice_max, step=step)


def axis_ticks(axis: AxisSpec) -> List[float]:
  return [clean_float(i * axis.step) for i in range(axis.tick_count)]
