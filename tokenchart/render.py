from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, Optional

import skia

from tokenchart.config import STYLE_TOKENS
from tokenchart.geometry import BarShape, ChartGeometry
from tokenchart.layout import Rect
from tokenchart.utils import parse_hex_color

logger = logging.getLogger(__name__)

# conic weight of a circular quarter arc
QUARTER_ARC_WEIGHT = math.sqrt(0.5)


def color_from_hex(color_hex: str, alpha: int = 255) -> int:
  r, g, b = parse_hex_color(color_hex)
  return skia.ColorSetARGB(alpha, r, g, b)


@dataclasses.dataclass(frozen=True)
class RenderTheme:
  # Colors
  bg_color: int = skia.ColorWHITE
  bar_color: int = skia.ColorSetARGB(255, 99, 102, 241)
  text_color: int = skia.ColorSetARGB(255, 100, 116, 139)
  grid_color: int = skia.ColorSetARGB(255, 226, 232, 240)
  cursor_color: int = skia.ColorSetARGB(255, 241, 245, 249)

  # Fonts
  font_family: str = "DejaVu Sans"
  font_size: float = 12.0

  # Grid line style
  grid_width: float = 1.0
  grid_dash_on: float = 4.0
  grid_dash_off: float = 4.0

  @classmethod
  def from_tokens(cls, tokens: Optional[Dict[str, str]] = None, **overrides) -> "RenderTheme":
    tk = {**STYLE_TOKENS, **(tokens or {})}
    return cls(
      bg_color=color_from_hex(tk["background"]),
      bar_color=color_from_hex(tk["bar"]),
      text_color=color_from_hex(tk["text"]),
      grid_color=color_from_hex(tk["grid"]),
      cursor_color=color_from_hex(tk["cursor"]),
      **overrides,
    )


def bar_path(bar: BarShape) -> skia.Path:
  path = skia.Path()
  for cmd in bar.commands:
    op = cmd[0]
    if op == "move":
      path.moveTo(float(cmd[1]), float(cmd[2]))
    elif op == "line":
      path.lineTo(float(cmd[1]), float(cmd[2]))
    elif op == "corner":
      _, cx, cy, x, y, _rx, _ry = cmd
      path.conicTo(float(cx), float(cy), float(x), float(y), QUARTER_ARC_WEIGHT)
    elif op == "close":
      path.close()
    else:
      raise ValueError(f"Unknown path command: {op!r}")
  return path


def _skrect(r: Rect) -> skia.Rect:
  return skia.Rect.MakeXYWH(float(r.x), float(r.y), float(r.width), float(r.height))


class SkiaRenderer:
  def __init__(self, theme: Optional[RenderTheme] = None):
    self.theme = theme or RenderTheme.from_tokens()
    tf = skia.Typeface(self.theme.font_family)
    self.font = skia.Font(tf, self.theme.font_size)

  def draw(self, canvas: skia.Canvas, geometry: ChartGeometry, active_zone: Optional[Rect] = None):
    t = self.theme
    canvas.clear(t.bg_color)

    # hover highlight sits under everything else
    if active_zone is not None:
      canvas.drawRect(_skrect(active_zone), skia.Paint(Color=t.cursor_color))

    grid_paint = skia.Paint(Style=skia.Paint.kStroke_Style, Color=t.grid_color, StrokeWidth=t.grid_width)
    grid_paint.setPathEffect(skia.DashPathEffect.Make([float(t.grid_dash_on), float(t.grid_dash_off)], 0.0))
    for line in geometry.grid_lines:
      canvas.drawLine(float(line.x1), float(line.y), float(line.x2), float(line.y), grid_paint)

    bar_paint = skia.Paint(Style=skia.Paint.kFill_Style, Color=t.bar_color, AntiAlias=True)
    for bar in geometry.bars:
      canvas.drawPath(bar_path(bar), bar_paint)

    text_paint = skia.Paint(AntiAlias=True, Color=t.text_color)
    for label in geometry.y_labels + geometry.x_labels:
      w = self.font.measureText(label.text)
      if label.align == "end":
        lx = label.x - w
      elif label.align == "middle":
        lx = label.x - w / 2.0
      else:
        lx = label.x
      canvas.drawString(label.text, float(lx), float(label.y), self.font, text_paint)

  @staticmethod
  def _surface_size(geometry: ChartGeometry):
    return max(1, int(math.ceil(geometry.viewport.width))), max(1, int(math.ceil(geometry.viewport.height)))

  def render_image(self, geometry: ChartGeometry, active_zone: Optional[Rect] = None) -> skia.Image:
    width, height = self._surface_size(geometry)
    surface = skia.Surface(width, height)
    self.draw(surface.getCanvas(), geometry, active_zone)
    return surface.makeImageSnapshot()

  def render_png(self, geometry: ChartGeometry, active_zone: Optional[Rect] = None) -> bytes:
    image = self.render_image(geometry, active_zone)
    data = image.encodeToData(skia.kPNG, 100)
    return bytes(data) if data is not None else b""

  def render_svg(self, geometry: ChartGeometry, active_zone: Optional[Rect] = None) -> bytes:
    width, height = self._surface_size(geometry)
    stream = skia.DynamicMemoryWStream()
    canvas = skia.SVGCanvas.Make(skia.Rect.MakeWH(width, height), stream)
    self.draw(canvas, geometry, active_zone)
    # the SVG document is only finalized once the canvas is gone
    del canvas
    return bytes(stream.detachAsData())
