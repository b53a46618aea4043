from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from tokenchart.axis import AxisSpec, axis_ticks
from tokenchart.config import BAR_GAP_PCT, BAR_MAX_WIDTH, CHART_MARGINS, LABEL_INTERVALS
from tokenchart.samples import Sample

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Viewport:
  width: float
  height: float

  @property
  def is_empty(self) -> bool:
    return not (self.width and self.height) or self.width <= 0 or self.height <= 0


@dataclasses.dataclass(frozen=True)
class Margins:
  top: float = CHART_MARGINS[0]
  right: float = CHART_MARGINS[1]
  bottom: float = CHART_MARGINS[2]
  left: float = CHART_MARGINS[3]


@dataclasses.dataclass(frozen=True)
class Rect:
  x: float
  y: float
  width: float
  height: float

  @property
  def right(self) -> float:
    return self.x + self.width

  @property
  def bottom(self) -> float:
    return self.y + self.height

  def contains(self, px: float, py: float) -> bool:
    # half-open so neighbouring rects never both claim a shared edge
    return self.x <= px < self.right and self.y <= py < self.bottom


@dataclasses.dataclass(frozen=True)
class HoverZone(Rect):
  sample_index: int = 0


@dataclasses.dataclass(frozen=True)
class Tick:
  y: float
  value: float


@dataclasses.dataclass(frozen=True)
class ChartLayout:
  viewport: Viewport
  margins: Margins
  plot: Rect
  axis: AxisSpec
  slot_width: float
  bar_width: float
  bars: Tuple[Rect, ...]
  zones: Tuple[HoverZone, ...]
  ticks: Tuple[Tick, ...]
  label_interval: int
  label_indices: Tuple[int, ...]


def label_interval_for(range_days: int, intervals: Optional[Dict[int, int]] = None) -> int:
  table = LABEL_INTERVALS if intervals is None else intervals
  return max(1, int(table.get(range_days, 1)))


def value_to_y(value: float, plot: Rect, axis: AxisSpec) -> float:
  return plot.bottom - (value / axis.nice_max) * plot.height


def layout_chart(
    viewport: Viewport,
    series: Sequence[Sample],
    axis: AxisSpec,
    margins: Optional[Margins] = None,
    range_days: Optional[int] = None,
    label_intervals: Optional[Dict[int, int]] = None,
    bar_gap_pct: float = BAR_GAP_PCT,
    bar_max_width: float = BAR_MAX_WIDTH,
) -> Optional[ChartLayout]:
  """
  Compute pixel geometry for one render pass.
  Returns None when there is nothing to draw (empty viewport, margins eating
  the whole surface, or an empty series); callers treat that as a no-op render.
  """
  if viewport is None or viewport.is_empty:
    logger.debug("layout skipped: empty viewport %s", viewport)
    return None
  m = margins or Margins()
  plot_w = float(viewport.width) - m.left - m.right
  plot_h = float(viewport.height) - m.top - m.bottom
  n = len(series)
  if plot_w <= 0 or plot_h <= 0 or n == 0:
    logger.debug("layout skipped: plot=%.1fx%.1f samples=%d", plot_w, plot_h, n)
    return None

  plot = Rect(x=float(m.left), y=float(m.top), width=plot_w, height=plot_h)

  slot_w = plot_w / n
  bar_w = min(slot_w * (1.0 - bar_gap_pct), bar_max_width)
  gap = slot_w - bar_w

  slot_x = plot.x + np.arange(n, dtype=np.float64) * slot_w
  values = np.fromiter((s.value for s in series), dtype=np.float64, count=n)
  bar_h = np.clip(values / axis.nice_max * plot_h, 0.0, None)
  bar_y = plot.bottom - bar_h

  bars = tuple(
    Rect(x=float(slot_x[i] + gap / 2.0), y=float(bar_y[i]), width=bar_w, height=float(bar_h[i]))
    for i in range(n)
  )
  zones = tuple(
    HoverZone(x=float(slot_x[i]), y=plot.y, width=slot_w, height=plot_h, sample_index=i)
    for i in range(n)
  )
  ticks = tuple(Tick(y=value_to_y(v, plot, axis), value=v) for v in axis_ticks(axis))

  interval = label_interval_for(n if range_days is None else range_days, label_intervals)
  label_indices = tuple(range(0, n, interval))

  return ChartLayout(
    viewport=viewport,
    margins=m,
    plot=plot,
    axis=axis,
    slot_width=slot_w,
    bar_width=bar_w,
    bars=bars,
    zones=zones,
    ticks=ticks,
    label_interval=interval,
    label_indices=label_indices,
  )
