"""
Timed playback of a path.

The engine walks a marker along the path one segment at a time. Each tick
advances the progress within the current segment, either by a fixed fraction
or, when the caller passes the elapsed time, proportionally to it. The marker
position is the linear interpolation between the segment's two cell centers.

States: idle -> playing <-> paused -> idle. ``stop`` returns to idle from any
state; finishing the last segment does too.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from ..core.grid import Grid
from ..diagnostics import DiagnosticsSink, resolve_sink

IDLE = "idle"
PLAYING = "playing"
PAUSED = "paused"

# Tolerance for segment boundaries reached by summing float steps
_EPS = 1e-9


@dataclass
class PlaybackFrame:
    """Marker state emitted on every tick."""
    position: np.ndarray
    segment_index: int
    target_index: int
    progress: float
    total_steps: int
    completed: bool = False


def default_speed(segments: int, traversal_seconds: float = 3.0, frame_rate: int = 60) -> float:
    """Per-tick step so the whole path takes ``traversal_seconds`` at ``frame_rate``."""
    if traversal_seconds <= 0:
        raise ValueError(f"traversal_seconds must be positive, got {traversal_seconds}")
    if frame_rate <= 0:
        raise ValueError(f"frame_rate must be positive, got {frame_rate}")
    if segments <= 0:
        return 0.0
    return segments / float(traversal_seconds * frame_rate)


class PlaybackEngine:
    """
    Replays a path over time.

    Attributes:
        phase: "idle", "playing" or "paused"
        segment_index: Index of the segment being traversed
        segment_progress: Fraction of the current segment already traversed
    """

    def __init__(
        self,
        grid: Grid,
        path: Sequence[Sequence[int]],
        speed: Optional[float] = None,
        traversal_seconds: float = 3.0,
        frame_rate: int = 60,
        on_step: Optional[Callable[[PlaybackFrame], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        sink: Optional[DiagnosticsSink] = None,
    ):
        if speed is not None and speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")
        if traversal_seconds <= 0:
            raise ValueError(f"traversal_seconds must be positive, got {traversal_seconds}")
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self.path = list(path)
        self.positions = grid.positions(self.path)
        self.segments = max(0, len(self.path) - 1)
        self.traversal_seconds = float(traversal_seconds)
        self.speed = speed if speed is not None else default_speed(
            self.segments, traversal_seconds, frame_rate
        )
        self.on_step = on_step
        self.on_complete = on_complete
        self._log = resolve_sink(sink, "playback")

        self.phase = IDLE
        self.segment_index = 0
        self.segment_progress = 0.0

    @classmethod
    def from_config(cls, grid: Grid, path: Sequence[Sequence[int]], config, **kwargs) -> "PlaybackEngine":
        """Build an engine from a PlaybackConfig."""
        return cls(
            grid,
            path,
            speed=config.speed,
            traversal_seconds=config.traversal_seconds,
            frame_rate=config.frame_rate,
            **kwargs,
        )

    @property
    def is_playing(self) -> bool:
        return self.phase == PLAYING

    # ---------- Transitions ----------

    def start(self) -> bool:
        """Restart from the first cell. Needs at least two cells."""
        if len(self.path) < 2:
            self._log.info("start_refused", length=len(self.path))
            return False
        self.segment_index = 0
        self.segment_progress = 0.0
        self.phase = PLAYING
        return True

    def pause(self) -> bool:
        if self.phase != PLAYING:
            return False
        self.phase = PAUSED
        return True

    def resume(self) -> bool:
        if self.phase != PAUSED:
            return False
        self.phase = PLAYING
        return True

    def stop(self):
        self.phase = IDLE
        self.segment_index = 0
        self.segment_progress = 0.0

    # ---------- Ticking ----------

    def _frame(self, completed: bool = False) -> PlaybackFrame:
        if completed:
            return PlaybackFrame(
                position=self.positions[-1].copy(),
                segment_index=self.segments - 1,
                target_index=self.segments,
                progress=1.0,
                total_steps=len(self.path),
                completed=True,
            )
        a = self.positions[self.segment_index]
        b = self.positions[self.segment_index + 1]
        t = self.segment_progress
        return PlaybackFrame(
            position=a + (b - a) * t,
            segment_index=self.segment_index,
            target_index=self.segment_index + 1,
            progress=t,
            total_steps=len(self.path),
        )

    def tick(self, delta: Optional[float] = None) -> Optional[PlaybackFrame]:
        """
        Advance the marker.

        Args:
            delta: Elapsed seconds since the previous tick; None advances by
                ``speed``

        Returns:
            The new frame, or None when not playing.
        """
        if self.phase != PLAYING:
            return None

        if delta is None:
            step = self.speed
        else:
            step = max(0.0, delta) * self.segments / self.traversal_seconds
        self.segment_progress += step

        while self.segment_progress >= 1.0 - _EPS:
            self.segment_progress = max(0.0, self.segment_progress - 1.0)
            self.segment_index += 1
            if self.segment_index >= self.segments:
                self.phase = IDLE
                frame = self._frame(completed=True)
                self.segment_index = 0
                self.segment_progress = 0.0
                if self.on_step is not None:
                    self.on_step(frame)
                if self.on_complete is not None:
                    self.on_complete()
                self._log.debug("complete", total_steps=len(self.path))
                return frame

        frame = self._frame()
        if self.on_step is not None:
            self.on_step(frame)
        return frame
