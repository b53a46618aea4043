from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Optional, Sequence, Tuple

from tokenchart.config import TOOLTIP_OFFSET, UNIT_SUFFIX
from tokenchart.geometry import ChartGeometry
from tokenchart.layout import HoverZone
from tokenchart.samples import Sample
from tokenchart.utils import format_full

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class HoverState:
  active_index: Optional[int] = None

  @property
  def active(self) -> bool:
    return self.active_index is not None


@dataclasses.dataclass(frozen=True)
class TooltipView:
  visible: bool
  position: Tuple[float, float] = (0.0, 0.0)
  title: str = ""
  body: str = ""


HIDDEN_TOOLTIP = TooltipView(visible=False)

TooltipSink = Callable[[TooltipView], None]


def locate_pointer(x: float, y: float, zones: Sequence[HoverZone]) -> Optional[int]:
  for zone in zones:
    if zone.contains(x, y):
      return zone.sample_index
  return None


def next_hover_state(state: HoverState, index: Optional[int]) -> HoverState:
  if state.active_index == index:
    return state
  return HoverState(active_index=index)


def tooltip_text(sample: Sample, unit: str = UNIT_SUFFIX) -> Tuple[str, str]:
  body = f"{format_full(sample.value)} {unit}".rstrip()
  return sample.long_label, body


class InteractionController:
  """
  Hover state machine over the zones of the last drawn geometry.
  Publishes TooltipView updates to the sink on enter / move / leave.
  """

  def __init__(self, sink: Optional[TooltipSink] = None, offset: Tuple[float, float] = TOOLTIP_OFFSET,
               unit: str = UNIT_SUFFIX):
    self._sink = sink
    self._offset = (float(offset[0]), float(offset[1]))
    self._unit = unit
    self._zones: Tuple[HoverZone, ...] = ()
    self._series: Tuple[Sample, ...] = ()
    self._pointer: Optional[Tuple[float, float]] = None
    self.state = HoverState()
    self.tooltip = HIDDEN_TOOLTIP

  @property
  def active_zone(self) -> Optional[HoverZone]:
    idx = self.state.active_index
    if idx is None or idx >= len(self._zones):
      return None
    return self._zones[idx]

  def attach(self, geometry: Optional[ChartGeometry], series: Sequence[Sample]):
    # zones of the previous draw are stale; re-resolve the last pointer against the new ones
    self._zones = geometry.zones if geometry is not None else ()
    self._series = tuple(series)
    was_active = self.state.active
    self.state = HoverState()
    if self._pointer is not None and self._zones:
      self.pointer_move(*self._pointer)
    if was_active and not self.state.active:
      self._publish(HIDDEN_TOOLTIP)

  def pointer_move(self, x: float, y: float) -> HoverState:
    self._pointer = (x, y)
    prev = self.state
    idx = locate_pointer(x, y, self._zones)
    self.state = next_hover_state(prev, idx)

    if idx is None:
      if prev.active:
        logger.debug("hover leave index=%s", prev.active_index)
        self._publish(HIDDEN_TOOLTIP)
      return self.state

    pos = (x + self._offset[0], y + self._offset[1])
    if idx != prev.active_index:
      logger.debug("hover enter index=%s", idx)
      title, body = tooltip_text(self._series[idx], self._unit)
      self._publish(TooltipView(visible=True, position=pos, title=title, body=body))
    else:
      self._publish(dataclasses.replace(self.tooltip, position=pos))
    return self.state

  def pointer_leave(self) -> HoverState:
    self._pointer = None
    if self.state.active:
      logger.debug("hover leave index=%s", self.state.active_index)
      self.state = HoverState()
      self._publish(HIDDEN_TOOLTIP)
    return self.state

  def _publish(self, view: TooltipView):
    self.tooltip = view
    if self._sink is not None:
      self._sink(view)
