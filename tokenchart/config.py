import json
import os


def _int_tuple(val: str, default: tuple, size: int = 0) -> tuple:
  if not val:
    return default
  parts = [x.strip() for x in val.split(",") if x.strip()]
  if not parts or not all(p.lstrip("-").isdigit() for p in parts):
    return default
  if size and len(parts) != size:
    return default
  return tuple(int(p) for p in parts)


DEFAULT_TZ = os.getenv("DEFAULT_TZ", "UTC")

# Range windows offered by the range selector (days)
SUPPORTED_RANGES = _int_tuple(os.getenv("SUPPORTED_RANGES", "1,7,30,90"), (1, 7, 30, 90))
DEFAULT_RANGE = int(os.getenv("DEFAULT_RANGE", "30"))

# X label thinning: {range_days: show_every_nth}; unknown ranges show every label
LABEL_INTERVALS = os.getenv("LABEL_INTERVALS", '{"90": 6, "30": 2}')
try:
  LABEL_INTERVALS = {int(k): int(v) for k, v in json.loads(LABEL_INTERVALS).items()}
except Exception:
  LABEL_INTERVALS = {90: 6, 30: 2}

# Surface defaults (used by the dump tool and as the fallback size provider)
IMG_WIDTH = int(os.getenv("IMG_WIDTH", "800"))
IMG_HEIGHT = int(os.getenv("IMG_HEIGHT", "300"))

# Chart margins: top, right, bottom, left
CHART_MARGINS = _int_tuple(os.getenv("CHART_MARGINS", "10,10,25,50"), (10, 10, 25, 50), size=4)

BAR_GAP_PCT = float(os.getenv("BAR_GAP_PCT", "0.02"))
BAR_MAX_WIDTH = float(os.getenv("BAR_MAX_WIDTH", "80"))
BAR_CORNER_RADIUS = float(os.getenv("BAR_CORNER_RADIUS", "4"))

RESIZE_DEBOUNCE_MS = int(os.getenv("RESIZE_DEBOUNCE_MS", "100"))

# Tooltip
UNIT_SUFFIX = os.getenv("UNIT_SUFFIX", "tokens")
TOOLTIP_OFFSET = _int_tuple(os.getenv("TOOLTIP_OFFSET", "15,-10"), (15, -10), size=2)

# Style tokens (hex RGB, no leading '#')
_DEFAULT_STYLE_TOKENS = {
  "bar": "6366f1",
  "text": "64748b",
  "grid": "e2e8f0",
  "cursor": "f1f5f9",
  "background": "ffffff",
}
STYLE_TOKENS = os.getenv("STYLE_TOKENS", "")
try:
  STYLE_TOKENS = {**_DEFAULT_STYLE_TOKENS, **json.loads(STYLE_TOKENS)} if STYLE_TOKENS else dict(_DEFAULT_STYLE_TOKENS)
except Exception:
  STYLE_TOKENS = dict(_DEFAULT_STYLE_TOKENS)
