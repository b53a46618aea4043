import math
from typing import Tuple

# (upper bound on the normalized step, multiplier); anything above maps to 10
NICE_LADDER = ((1.5, 1.0), (3.0, 2.5), (7.0, 5.0))


def clean_float(x: float, digits: int = 12) -> float:
  # drop binary noise such as 0.30000000000000004
  if x == 0 or not math.isfinite(x):
    return x
  return float(f"{x:.{digits}g}")


def nice_step(raw: float) -> float:
  if not math.isfinite(raw) or raw <= 0:
    return 1.0
  exp = math.floor(math.log10(raw))
  base = 10.0 ** exp
  factor = raw / base
  for limit, m in NICE_LADDER:
    if factor < limit:
      return clean_float(m * base)
  return clean_float(10.0 * base)


def _trim(num: float, decimals: int) -> str:
  s = f"{num:.{decimals}f}"
  if "." in s:
    s = s.rstrip("0").rstrip(".")
  return s


def format_compact(value: float) -> str:
  """Axis label text: 45000 -> '45k', 2500 -> '2.5k', 500 -> '500'."""
  if abs(value) >= 1000:
    return f"{_trim(value / 1000.0, 2)}k"
  return _trim(value, 2)


def format_full(value: float) -> str:
  return f"{int(round(value)):,}"


def parse_hex_color(color_hex: str) -> Tuple[int, int, int]:
  s = (color_hex or "").lstrip("#")
  try:
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
  except ValueError:
    return 0, 0, 0
