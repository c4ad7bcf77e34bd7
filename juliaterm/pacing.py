from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

SMOOTHING = 0.85


@dataclass
class FrameMetrics:
    """Frame counter and smoothed FPS for the status line. Never fed back into the simulation."""
    target_fps: float = 60.0
    frames: int = 0
    smoothed_fps: float = 60.0

    def record(self, frame_cost: float) -> float:
        self.frames += 1
        inst = 1.0 / frame_cost if frame_cost > 0.0 else self.target_fps
        self.smoothed_fps = self.smoothed_fps * SMOOTHING + inst * (1.0 - SMOOTHING)
        return self.smoothed_fps


class FramePacer:
    """
    Fixed-rate frame pacing.

    ``tick`` reports wall-clock time since the previous tick; the animation
    consumes that as dt, so a slow frame only lowers the visible rate and
    the motion stays in step with real time. ``pace`` sleeps whatever is
    left of the frame budget and does nothing on overrun.
    """

    def __init__(
        self,
        target_fps: float = 60.0,
        *,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if target_fps <= 0:
            raise ValueError("target_fps must be positive.")
        self.target_fps = float(target_fps)
        self.target_interval = 1.0 / self.target_fps
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self.metrics = FrameMetrics(target_fps=self.target_fps, smoothed_fps=self.target_fps)

    def now(self) -> float:
        return self._clock()

    def tick(self) -> float:
        now = self._clock()
        elapsed = 0.0 if self._last is None else max(0.0, now - self._last)
        self._last = now
        return elapsed

    def pace(self, frame_cost: float, target_interval: Optional[float] = None) -> float:
        interval = self.target_interval if target_interval is None else target_interval
        remaining = interval - frame_cost
        if remaining <= 0.0:
            return 0.0
        self._sleep(remaining)
        return remaining
