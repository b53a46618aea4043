from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
  def schedule(self, delay_s: float, fn: Callable[[], Any]) -> Any: ...

  def cancel(self, handle: Any) -> None: ...


class AsyncioScheduler:
  """Deferred callbacks on an asyncio event loop (the running one unless given)."""

  def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
    self._loop = loop

  def schedule(self, delay_s: float, fn: Callable[[], Any]) -> asyncio.TimerHandle:
    loop = self._loop or asyncio.get_running_loop()
    return loop.call_later(delay_s, fn)

  def cancel(self, handle: asyncio.TimerHandle) -> None:
    handle.cancel()


class Debouncer:
  """
  Collapse bursts of calls into one deferred call.
  Each call cancels the pending task and re-arms it, so the callback runs once,
  delay_ms after the last call, with that call's arguments.
  """

  def __init__(self, callback: Callable[..., Any], *, delay_ms: int, scheduler: Scheduler):
    if delay_ms <= 0:
      raise ValueError("delay_ms must be > 0")
    self._callback = callback
    self._delay_s = delay_ms / 1000.0
    self._scheduler = scheduler
    self._handle: Any = None
    self._args: Tuple[Tuple[Any, ...], dict] = ((), {})

  @property
  def pending(self) -> bool:
    return self._handle is not None

  def __call__(self, *args: Any, **kwargs: Any) -> None:
    if self._handle is not None:
      self._scheduler.cancel(self._handle)
    self._args = (args, dict(kwargs))
    self._handle = self._scheduler.schedule(self._delay_s, self._fire)

  def cancel(self) -> None:
    if self._handle is not None:
      self._scheduler.cancel(self._handle)
      self._handle = None

  def _fire(self) -> None:
    self._handle = None
    args, kwargs = self._args
    self._args = ((), {})
    try:
      self._callback(*args, **kwargs)
    except Exception:
      logger.exception("Debounced callback failed")
