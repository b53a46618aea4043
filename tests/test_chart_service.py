from __future__ import annotations

import pytest

from tokenchart.chart_service import UsageChart
from tokenchart.samples import InvalidRange, SampleSeriesGenerator


@pytest.fixture
def surface():
  return {"size": (800, 300)}


@pytest.fixture
def make_chart(surface, generator, fake_scheduler, recording_renderer):
  def _make(**kwargs):
    params = dict(
      size_provider=lambda: surface["size"],
      source=generator,
      renderer=recording_renderer,
      scheduler=fake_scheduler,
    )
    params.update(kwargs)
    return UsageChart(**params)

  return _make


def test_set_range_generates_and_renders(make_chart, recording_renderer) -> None:
  frames = []
  chart = make_chart(on_draw=frames.append)
  frame = chart.set_range(30)

  assert chart.range_days == 30
  assert len(chart.series) == 30
  assert chart.axis.nice_max >= max(s.value for s in chart.series)
  assert frame is not None and frame.image == b"png"
  assert frame.geometry.sample_count == 30
  assert frames == [frame]
  assert len(recording_renderer.calls) == 1


def test_start_uses_default_range(make_chart) -> None:
  chart = make_chart()
  chart.start()
  assert chart.range_days == 30


@pytest.mark.parametrize("days", [0, -7, 45, 3])
def test_set_range_rejects_unsupported(make_chart, recording_renderer, days) -> None:
  chart = make_chart()
  with pytest.raises(InvalidRange):
    chart.set_range(days)
  assert chart.series == ()
  assert recording_renderer.calls == []


def test_custom_supported_ranges(make_chart) -> None:
  chart = make_chart(supported_ranges=(14,))
  chart.set_range(14)
  assert len(chart.series) == 14
  with pytest.raises(InvalidRange):
    chart.set_range(30)


def test_render_before_range_is_noop(make_chart, recording_renderer) -> None:
  assert make_chart().render() is None
  assert recording_renderer.calls == []


def test_empty_viewport_is_benign_noop(make_chart, surface, recording_renderer) -> None:
  surface["size"] = (0, 0)
  chart = make_chart()
  assert chart.set_range(7) is None
  assert chart.geometry is None
  assert recording_renderer.calls == []

  surface["size"] = None
  assert chart.render() is None


def test_render_requeries_surface_size(make_chart, surface) -> None:
  chart = make_chart()
  chart.set_range(7)
  assert chart.geometry.viewport.width == 800
  surface["size"] = (1200, 400)
  chart.render()
  assert chart.geometry.viewport.width == 1200
  assert chart.geometry.plot.height == 400 - 35


def test_resize_burst_redraws_once(make_chart, surface, fake_scheduler, recording_renderer) -> None:
  chart = make_chart()
  chart.set_range(30)
  recording_renderer.calls.clear()

  for w in (700, 650, 600, 550, 500):
    surface["size"] = (w, 300)
    chart.on_resize()
    fake_scheduler.advance(50)

  assert recording_renderer.calls == []
  fake_scheduler.advance(50)
  assert len(recording_renderer.calls) == 1
  assert chart.geometry.viewport.width == 500


def test_resize_does_not_regenerate_series(make_chart, fake_scheduler) -> None:
  class CountingSource:
    def __init__(self):
      self.inner = SampleSeriesGenerator()
      self.calls = 0

    def generate(self, days):
      self.calls += 1
      return self.inner.generate(days)

  source = CountingSource()
  chart = make_chart(source=source)
  chart.set_range(7)
  chart.on_resize()
  fake_scheduler.advance(100)
  assert source.calls == 1


def test_cancel_pending_resize(make_chart, fake_scheduler, recording_renderer) -> None:
  chart = make_chart()
  chart.set_range(7)
  recording_renderer.calls.clear()
  chart.on_resize()
  chart.cancel_pending()
  fake_scheduler.advance(500)
  assert recording_renderer.calls == []


def test_hover_redraws_with_highlight(make_chart, recording_renderer) -> None:
  tips = []
  chart = make_chart(tooltip_sink=tips.append)
  chart.set_range(30)
  recording_renderer.calls.clear()

  zone = chart.geometry.zones[4]
  chart.pointer_move(zone.x + 1, zone.y + 1)
  assert chart.interaction.state.active_index == 4
  assert recording_renderer.calls[-1][2] == zone
  assert tips[-1].title == chart.series[4].long_label

  # moving inside the same column only repositions the tooltip
  chart.pointer_move(zone.x + 2, zone.y + 2)
  assert len(recording_renderer.calls) == 1

  chart.pointer_leave()
  assert recording_renderer.calls[-1][2] is None
  assert tips[-1].visible is False
  assert chart.frame.hover.active_index is None


def test_svg_output(make_chart, recording_renderer) -> None:
  chart = make_chart(fmt="svg")
  frame = chart.set_range(7)
  assert frame.fmt == "svg"
  assert recording_renderer.calls[-1][0] == "svg"


def test_rejects_unknown_format(make_chart) -> None:
  with pytest.raises(ValueError):
    make_chart(fmt="gif")


def test_full_pipeline_renders_png(generator, fake_scheduler) -> None:
  chart = UsageChart(size_provider=lambda: (400, 200), source=generator, scheduler=fake_scheduler)
  frame = chart.set_range(7)
  assert frame.image.startswith(b"\x89PNG")
  zone = frame.geometry.zones[0]
  chart.pointer_move(zone.x + 1, zone.y + 1)
  assert chart.frame.image.startswith(b"\x89PNG")


def test_failed_source_leaves_previous_state(make_chart, recording_renderer) -> None:
  class FlakySource:
    def __init__(self):
      self.inner = SampleSeriesGenerator()
      self.calls = 0

    def generate(self, days):
      self.calls += 1
      if self.calls > 1:
        raise RuntimeError("metrics backend unavailable")
      return self.inner.generate(days)

  chart = make_chart(source=FlakySource())
  chart.set_range(30)
  series, axis = chart.series, chart.axis

  with pytest.raises(RuntimeError):
    chart.set_range(90)

  assert chart.range_days == 30
  assert chart.series is series
  assert chart.axis is axis
  assert chart.render().geometry.sample_count == 30


def test_real_svg_output_is_finalized(generator, fake_scheduler) -> None:
  chart = UsageChart(size_provider=lambda: (400, 200), source=generator, scheduler=fake_scheduler, fmt="svg")
  frame = chart.set_range(7)
  assert frame.image.lstrip().startswith(b"<?xml") or frame.image.lstrip().startswith(b"<svg")
  assert frame.image.rstrip().endswith(b"</svg>")
