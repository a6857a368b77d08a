"""Actuator manager: at most one waveform operation on the light at a time.

Two states guarded by one lock: idle and running. A request made while
idle flips the run flag and submits the operation to the event loop; a
request made while running is dropped and logged (no queueing, no
interruption of the running fade). The flag is cleared when the
operation finishes, whatever its outcome. Lock, unlock and blink share
the same flag because they drive the same pin.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Callable, Coroutine
from typing import Any

from vehicle_dashboard.actuator.waveform import WaveformController
from vehicle_dashboard.exceptions import HardwareWriteError

_logger = logging.getLogger(__name__)

Operation = Callable[[], Coroutine[Any, Any, None]]


class ActuatorManager:
    """Fire-and-forget actuator intents for the refresh cycle.

    Every ``request_*`` method returns immediately: ``True`` when the
    operation was started, ``False`` when it was dropped. Neither outcome
    is an error for the caller.

    Parameters
    ----------
    controller : WaveformController
        Waveform controller bound to the indicator light.
    loop : asyncio.AbstractEventLoop or None
        Loop that runs the operations. Required when requests come from
        a thread other than the loop's own; otherwise the running loop
        is used.
    """

    def __init__(
        self,
        controller: WaveformController,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._controller = controller
        self._loop = loop
        self._lock = threading.Lock()
        self._running = False
        self._inflight: concurrent.futures.Future[None] | None = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def request_lock(self) -> bool:
        return self._submit("lock", self._controller.fade_out)

    def request_unlock(self) -> bool:
        return self._submit("unlock", self._controller.fade_in)

    def request_blink(self, phase: bool) -> bool:
        async def _blink() -> None:
            self._controller.set_level(phase)

        return self._submit("blink", _blink)

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def _submit(self, name: str, operation: Operation) -> bool:
        with self._lock:
            if self._running:
                _logger.info("%s light task is already running; request dropped", name.capitalize())
                return False
            self._running = True

        coro = self._run(name, operation)
        try:
            loop = self._resolve_loop()
            future = asyncio.run_coroutine_threadsafe(coro, loop)
        except RuntimeError as exc:
            coro.close()
            with self._lock:
                self._running = False
            _logger.error("Cannot start %s light task: %s", name, exc)
            return False
        with self._lock:
            self._inflight = future
        future.add_done_callback(self._on_done)
        return True

    def _on_done(self, future: concurrent.futures.Future[None]) -> None:
        # A future cancelled before its coroutine started never runs _run's finally.
        if future.cancelled():
            with self._lock:
                if self._inflight is future:
                    self._running = False

    async def _run(self, name: str, operation: Operation) -> None:
        try:
            await operation()
        except HardwareWriteError as exc:
            _logger.error("Error in %s light task: %s", name, exc)
        except Exception:
            _logger.exception("Unexpected error in %s light task", name)
        finally:
            with self._lock:
                self._running = False

    async def wait_idle(self) -> None:
        """Wait until the operation in flight, if any, has finished."""
        inflight = self._inflight
        if inflight is None:
            return
        await asyncio.wait({asyncio.wrap_future(inflight)})
