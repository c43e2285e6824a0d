"""
utils/scan_loop.py
---------------------------------
Attendance scan loop.

    idle -> scanning -> detecting -> recognizing -> success | error -> idle

Every ``interval`` seconds one frame is captured and two remote calls are
awaited in order: a presence check (``detect``) and then an identity check
(``identify``). Both return the action dicts from ``utils.actions``.

- no face, or the presence check fails: back to ``scanning`` (a failure also
  emits an ``error`` event, the UI toast)
- identity check succeeds: ``success``; fails: ``error``
- after ``success`` or ``error`` the loop waits ``reset_delay`` and goes back
  to ``idle``

There is no backoff and no limit on consecutive failures. A slow call just
delays the next tick.
"""

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    DETECTING = "detecting"
    RECOGNIZING = "recognizing"
    SUCCESS = "success"
    ERROR = "error"


FINISHED = (ScanState.SUCCESS, ScanState.ERROR)


class ScanLoop:

    def __init__(self, capture_frame, detect, identify, interval=2.0, reset_delay=5.0,
                 on_event=None, can_start=None):
        self.capture_frame = capture_frame
        self.detect = detect
        self.identify = identify
        self.interval = interval
        self.reset_delay = reset_delay
        self.on_event = on_event
        self.can_start = can_start or (lambda: True)

        self.state = ScanState.IDLE
        self.last_result = None
        self._stop = threading.Event()
        # Bumped by stop(); a tick started under an older value drops its result
        self._generation = 0

    def _set_state(self, state):
        if state != self.state:
            logger.debug("[SCAN] %s -> %s", self.state.value, state.value)
        self.state = state

    def _emit(self, kind, payload):
        if self.on_event:
            self.on_event(kind, payload)

    def start(self):
        """Leave ``idle`` and begin scanning. Returns False if not allowed."""
        if self.state != ScanState.IDLE or not self.can_start():
            return False
        self._set_state(ScanState.SCANNING)
        return True

    def stop(self):
        """Cancel the timer and return to ``idle``."""
        self._stop.set()
        self._generation += 1
        self._set_state(ScanState.IDLE)

    def reset(self):
        if self.state in FINISHED:
            self._set_state(ScanState.IDLE)

    def tick(self):
        """One timer firing. Returns the state after the tick."""
        if self.state != ScanState.SCANNING:
            return self.state

        frame = self.capture_frame()
        if frame is None:
            # Nothing to look at (camera busy, page hidden); try next tick
            return self.state

        generation = self._generation
        self._set_state(ScanState.DETECTING)
        detection = self._call(self.detect, frame)
        if generation != self._generation:
            return self.state
        if not detection.get("success"):
            self._emit("error", detection)
            self._set_state(ScanState.SCANNING)
            return self.state
        if not detection.get("face_detected"):
            self._set_state(ScanState.SCANNING)
            return self.state

        self._set_state(ScanState.RECOGNIZING)
        result = self._call(self.identify, frame)
        if generation != self._generation:
            return self.state
        self.last_result = result
        if result.get("success"):
            self._set_state(ScanState.SUCCESS)
            self._emit("success", result)
        else:
            self._set_state(ScanState.ERROR)
            self._emit("error", result)
        return self.state

    @staticmethod
    def _call(func, frame):
        try:
            result = func(frame)
        except Exception as e:
            logger.exception("[SCAN] remote call failed")
            return {"success": False, "error": str(e) or "Remote call failed."}
        return result if isinstance(result, dict) else {"success": False, "error": "No response."}

    def run(self, continuous=True, max_ticks=None):
        """
        Drive the loop on the current thread until ``stop()`` is called.

        With ``continuous=False`` the loop ends after the first success
        (single student check-in); otherwise it keeps scanning.
        """
        self._stop.clear()
        ticks = 0
        while not self._stop.is_set():
            if self.state == ScanState.IDLE and not self.start():
                break
            if self._stop.wait(self.interval):
                break

            state = self.tick()
            ticks += 1

            if state in FINISHED:
                if state == ScanState.SUCCESS and not continuous:
                    break
                if self._stop.wait(self.reset_delay):
                    break
                self.reset()

            if max_ticks is not None and ticks >= max_ticks:
                break
        return self.state
