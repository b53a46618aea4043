from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(), override=False)

from tokenchart.config import DEFAULT_RANGE, IMG_HEIGHT, IMG_WIDTH
from tokenchart.chart_service import UsageChart
from tokenchart.logging_conf import setup_logging
from tokenchart.scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)


def _print_debug(chart: UsageChart):
  axis = chart.axis
  geo = chart.geometry
  values = [s.value for s in chart.series]
  print(f"DEBUG: range={chart.range_days}d samples={len(values)} "
        f"min={min(values)} max={max(values)} nice_max={axis.nice_max:g} step={axis.step:g}")
  if geo is None:
    print("DEBUG: empty viewport, nothing drawn")
    return
  slot = geo.zones[0].width if geo.zones else 0.0
  print(f"DEBUG: plot={geo.plot.width:.1f}x{geo.plot.height:.1f} slot={slot:.2f} "
        f"bar={geo.bars[0].rect.width:.2f} rounded={sum(1 for b in geo.bars if b.rounded)}/{len(geo.bars)} "
        f"x_labels={len(geo.x_labels)} grid={[g.value for g in geo.grid_lines]}")
  if chart.interaction.tooltip.visible:
    tip = chart.interaction.tooltip
    print(f"DEBUG: tooltip at {tip.position}: {tip.title} / {tip.body}")


def main() -> int:
  ap = argparse.ArgumentParser(description="Render the usage chart to a file")
  ap.add_argument("--range", type=int, default=DEFAULT_RANGE, help="Range window in days")
  ap.add_argument("--width", type=int, default=IMG_WIDTH)
  ap.add_argument("--height", type=int, default=IMG_HEIGHT)
  ap.add_argument("--format", choices=("png", "svg"), default="png")
  ap.add_argument("--out", type=Path, default=None, help="Output file (default: usage_<range>d.<format>)")
  ap.add_argument("--hover-x", type=float, default=None, help="Pointer x to render with an active hover")
  ap.add_argument("--hover-y", type=float, default=None, help="Pointer y (default: middle of the surface)")
  ap.add_argument("--debug", action="store_true", help="Print axis/layout summary")
  args = ap.parse_args()

  setup_logging(logging.DEBUG if args.debug else logging.INFO)

  # the dump tool never resizes, so the scheduler is never armed
  chart = UsageChart(size_provider=lambda: (args.width, args.height), scheduler=AsyncioScheduler(), fmt=args.format)

  t0 = time.time()
  frame = chart.set_range(args.range)
  t_render = time.time()

  if args.hover_x is not None:
    hy = args.hover_y if args.hover_y is not None else args.height / 2.0
    chart.pointer_move(args.hover_x, hy)
    frame = chart.frame or frame
  t1 = time.time()

  if args.debug:
    _print_debug(chart)

  if frame is None:
    print("Nothing to render (empty viewport)")
    return 1

  out = args.out or Path(f"usage_{args.range}d.{args.format}")
  out.write_bytes(frame.image)
  print("generate+render={:.1f}ms hover={:.1f}ms size={:.1f}KB".format(
    1000 * (t_render - t0), 1000 * (t1 - t_render), len(frame.image) / 1024.0))
  print(f"Wrote {out}")
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
