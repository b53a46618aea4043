from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

from tokenchart.axis import AxisSpec, compute_axis
from tokenchart.config import DEFAULT_RANGE, RESIZE_DEBOUNCE_MS, SUPPORTED_RANGES
from tokenchart.geometry import ChartGeometry, build_geometry
from tokenchart.interaction import HoverState, InteractionController, TooltipSink
from tokenchart.layout import Margins, Viewport, layout_chart
from tokenchart.render import SkiaRenderer
from tokenchart.samples import InvalidRange, SampleSeriesGenerator, SampleSource, Series, validate_days
from tokenchart.scheduler import AsyncioScheduler, Debouncer, Scheduler

logger = logging.getLogger(__name__)

SizeProvider = Callable[[], Optional[Tuple[float, float]]]


@dataclasses.dataclass(frozen=True)
class ChartFrame:
  geometry: ChartGeometry
  hover: HoverState
  image: bytes
  fmt: str


class UsageChart:
  """
  Owns the chart state for one drawing surface: active range, series, axis,
  last geometry and hover state. All entry points are synchronous except the
  debounced resize redraw.
  """

  def __init__(
      self,
      size_provider: SizeProvider,
      source: Optional[SampleSource] = None,
      renderer: Optional[SkiaRenderer] = None,
      scheduler: Optional[Scheduler] = None,
      tooltip_sink: Optional[TooltipSink] = None,
      on_draw: Optional[Callable[[ChartFrame], None]] = None,
      supported_ranges: Sequence[int] = SUPPORTED_RANGES,
      label_intervals: Optional[Dict[int, int]] = None,
      margins: Optional[Margins] = None,
      debounce_ms: int = RESIZE_DEBOUNCE_MS,
      fmt: str = "png",
  ):
    if fmt not in ("png", "svg"):
      raise ValueError(f"Unsupported output format: {fmt}")
    self.size_provider = size_provider
    self.source = source or SampleSeriesGenerator()
    self.renderer = renderer or SkiaRenderer()
    self.supported_ranges = tuple(supported_ranges)
    self.label_intervals = label_intervals
    self.margins = margins or Margins()
    self.fmt = fmt
    self.on_draw = on_draw
    self.interaction = InteractionController(tooltip_sink)
    self._resize = Debouncer(self.render, delay_ms=debounce_ms, scheduler=scheduler or AsyncioScheduler())

    self.range_days: Optional[int] = None
    self.series: Series = ()
    self.axis: Optional[AxisSpec] = None
    self.geometry: Optional[ChartGeometry] = None
    self.frame: Optional[ChartFrame] = None

  def start(self) -> Optional[ChartFrame]:
    return self.set_range(DEFAULT_RANGE)

  def set_range(self, days: int) -> Optional[ChartFrame]:
    days = validate_days(days)
    if self.supported_ranges and days not in self.supported_ranges:
      raise InvalidRange(f"range {days} is not one of {self.supported_ranges}")
    series = self.source.generate(days)
    axis = compute_axis(max(s.value for s in series))
    logger.info("range -> %d days", days)
    self.range_days, self.series, self.axis = days, series, axis
    return self.render()

  def _viewport(self) -> Optional[Viewport]:
    size = self.size_provider()
    if not size:
      return None
    return Viewport(width=size[0], height=size[1])

  def render(self) -> Optional[ChartFrame]:
    if self.axis is None:
      logger.debug("render skipped: no range selected yet")
      return None
    layout = layout_chart(
      self._viewport(),
      self.series,
      self.axis,
      margins=self.margins,
      range_days=self.range_days,
      label_intervals=self.label_intervals,
    )
    if layout is None:
      self.geometry = None
      self.frame = None
      self.interaction.attach(None, self.series)
      return None
    self.geometry = build_geometry(layout, self.series)
    self.interaction.attach(self.geometry, self.series)
    return self._draw()

  def _draw(self) -> ChartFrame:
    active = self.interaction.active_zone
    if self.fmt == "svg":
      image = self.renderer.render_svg(self.geometry, active)
    else:
      image = self.renderer.render_png(self.geometry, active)
    self.frame = ChartFrame(geometry=self.geometry, hover=self.interaction.state, image=image, fmt=self.fmt)
    if self.on_draw is not None:
      self.on_draw(self.frame)
    return self.frame

  def on_resize(self):
    self._resize()

  def cancel_pending(self):
    self._resize.cancel()

  def pointer_move(self, x: float, y: float) -> HoverState:
    prev = self.interaction.state
    state = self.interaction.pointer_move(x, y)
    if state.active_index != prev.active_index and self.geometry is not None:
      self._draw()
    return state

  def pointer_leave(self) -> HoverState:
    prev = self.interaction.state
    state = self.interaction.pointer_leave()
    if prev.active and self.geometry is not None:
      self._draw()
    return state
