from __future__ import annotations

import dataclasses
from typing import Sequence, Tuple, Union

from tokenchart.config import BAR_CORNER_RADIUS
from tokenchart.layout import ChartLayout, HoverZone, Rect, Viewport
from tokenchart.samples import Sample
from tokenchart.utils import format_compact

# Path commands:
#   ("move", x, y) | ("line", x, y) | ("close",)
#   ("corner", cx, cy, x, y, rx, ry)  quarter ellipse from the current point to (x, y),
#                                      (cx, cy) being the corner it rounds off
PathCommand = Tuple[Union[str, float], ...]

Y_LABEL_DX = 10.0
Y_LABEL_BASELINE_DY = 4.0
X_LABEL_BOTTOM_DY = 5.0


@dataclasses.dataclass(frozen=True)
class BarShape:
  rect: Rect
  rounded: bool
  commands: Tuple[PathCommand, ...]

  @property
  def svg_path(self) -> str:
    return commands_to_svg(self.commands)


@dataclasses.dataclass(frozen=True)
class GridLine:
  x1: float
  x2: float
  y: float
  value: float


@dataclasses.dataclass(frozen=True)
class TextAnchor:
  x: float
  y: float
  text: str
  align: str  # "end" | "middle"


@dataclasses.dataclass(frozen=True)
class ChartGeometry:
  viewport: Viewport
  plot: Rect
  bars: Tuple[BarShape, ...]
  zones: Tuple[HoverZone, ...]
  grid_lines: Tuple[GridLine, ...]
  x_labels: Tuple[TextAnchor, ...]
  y_labels: Tuple[TextAnchor, ...]

  @property
  def sample_count(self) -> int:
    return len(self.zones)


def _fmt(v: float) -> str:
  return f"{v:.3f}".rstrip("0").rstrip(".")


def commands_to_svg(commands: Sequence[PathCommand]) -> str:
  parts = []
  for cmd in commands:
    op = cmd[0]
    if op == "move":
      parts.append(f"M {_fmt(cmd[1])},{_fmt(cmd[2])}")
    elif op == "line":
      parts.append(f"L {_fmt(cmd[1])},{_fmt(cmd[2])}")
    elif op == "corner":
      _, _cx, _cy, x, y, rx, ry = cmd
      parts.append(f"A {_fmt(rx)},{_fmt(ry)} 0 0 1 {_fmt(x)},{_fmt(y)}")
    elif op == "close":
      parts.append("Z")
    else:
      raise ValueError(f"Unknown path command: {op!r}")
  return " ".join(parts)


def bar_outline(rect: Rect, radius: float = BAR_CORNER_RADIUS) -> BarShape:
  x, y, w, h = rect.x, rect.y, rect.width, max(0.0, rect.height)
  bottom = y + h
  if h < radius or radius <= 0:
    return BarShape(rect=rect, rounded=False, commands=(
      ("move", x, bottom),
      ("line", x, y),
      ("line", x + w, y),
      ("line", x + w, bottom),
      ("close",),
    ))

  # narrow bars: keep both top corners inside the bar width
  rx = min(radius, w / 2.0)
  ry = radius
  return BarShape(rect=rect, rounded=True, commands=(
    ("move", x, bottom),
    ("line", x, y + ry),
    ("corner", x, y, x + rx, y, rx, ry),
    ("line", x + w - rx, y),
    ("corner", x + w, y, x + w, y + ry, rx, ry),
    ("line", x + w, bottom),
    ("close",),
  ))


def build_geometry(layout: ChartLayout, series: Sequence[Sample], corner_radius: float = BAR_CORNER_RADIUS) -> ChartGeometry:
  plot = layout.plot

  bars = tuple(bar_outline(r, corner_radius) for r in layout.bars)

  grid_lines = tuple(GridLine(x1=plot.x, x2=plot.right, y=t.y, value=t.value) for t in layout.ticks)
  y_labels = tuple(
    TextAnchor(x=plot.x - Y_LABEL_DX, y=t.y + Y_LABEL_BASELINE_DY, text=format_compact(t.value), align="end")
    for t in layout.ticks
  )

  label_y = float(layout.viewport.height) - X_LABEL_BOTTOM_DY
  x_labels = []
  for i in layout.label_indices:
    bar = layout.bars[i]
    x_labels.append(TextAnchor(x=bar.x + bar.width / 2.0, y=label_y, text=series[i].short_label, align="middle"))

  return ChartGeometry(
    viewport=layout.viewport,
    plot=plot,
    bars=bars,
    zones=layout.zones,
    grid_lines=grid_lines,
    x_labels=tuple(x_labels),
    y_labels=y_labels,
  )
