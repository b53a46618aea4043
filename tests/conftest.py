from __future__ import annotations

from datetime import date
from typing import Any, Callable, List

import pytest

from tokenchart.samples import SampleSeriesGenerator

FIXED_TODAY = date(2026, 10, 18)


class FakeScheduler:
  """Virtual-clock scheduler; time only moves through advance()."""

  def __init__(self):
    self.now_ms = 0
    self.tasks: List[List[Any]] = []  # [due_ms, seq, fn, cancelled]
    self._seq = 0

  def schedule(self, delay_s: float, fn: Callable[[], Any]):
    self._seq += 1
    task = [self.now_ms + int(round(delay_s * 1000)), self._seq, fn, False]
    self.tasks.append(task)
    return task

  def cancel(self, handle):
    handle[3] = True

  @property
  def live(self) -> int:
    return sum(1 for t in self.tasks if not t[3])

  def advance(self, ms: int):
    target = self.now_ms + ms
    while True:
      due = sorted((t for t in self.tasks if not t[3] and t[0] <= target), key=lambda t: (t[0], t[1]))
      if not due:
        break
      task = due[0]
      task[3] = True
      self.now_ms = task[0]
      task[2]()
    self.now_ms = target


class RecordingRenderer:
  def __init__(self):
    self.calls = []

  def render_png(self, geometry, active_zone=None) -> bytes:
    self.calls.append(("png", geometry, active_zone))
    return b"png"

  def render_svg(self, geometry, active_zone=None) -> bytes:
    self.calls.append(("svg", geometry, active_zone))
    return b"<svg/>"


@pytest.fixture
def generator() -> SampleSeriesGenerator:
  return SampleSeriesGenerator(today=lambda: FIXED_TODAY)


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
  return FakeScheduler()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
  return RecordingRenderer()
