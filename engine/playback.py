"""
playback.py — Step-by-Step Playback Controller
===============================================
The PlaybackController is the ONLY object the UI drives during a run.
It holds a cursor into a finished DijkstraRun's snapshots and exposes
next / prev / skip / stop plus timed auto-advance.

State machine:
    IDLE     →  start(run)        →  RUNNING
    RUNNING  →  timer fires       →  RUNNING   (cursor + 1)
    RUNNING  →  reaches the end   →  PAUSED    (on_complete fires)
    RUNNING  →  next / prev / skip / pause  →  PAUSED
    PAUSED   →  resume()          →  RUNNING   (unless already at the end)
    any      →  stop()            →  IDLE

Timer ownership:
  At most one timer is outstanding.  Every path that schedules first
  cancels the current handle and bumps a generation counter, so even a
  scheduler that delivers a late callback cannot move the cursor.

Navigation while IDLE is a silent no-op (methods return False); the UI is
expected to grey those buttons out, but we don't rely on it.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from algorithms import AlgorithmSnapshot, DijkstraRun
from engine.scheduler import Scheduler, TickScheduler, TimerHandle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackMode(Enum):
    IDLE    = "idle"
    RUNNING = "running"
    PAUSED  = "paused"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step) — the seven notches of the slider
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slowest": 2000,
    "slower":  1250,
    "slow":    800,
    "medium":  500,
    "fast":    250,
    "faster":  100,
    "fastest": 65,
}

DEFAULT_AUTORUN_MS = SPEED_PRESETS["medium"]
MIN_AUTORUN_MS     = 20


# ---------------------------------------------------------------------------
# PlaybackController
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        mode        : Current PlaybackMode.
        interval_ms : Delay between auto-advance ticks.
        on_step     : Optional callback(snapshot) fired every time the cursor moves.
        on_complete : Optional callback(run) fired when the cursor lands on the last snapshot.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        interval_ms: int = DEFAULT_AUTORUN_MS,
        on_step: Optional[Callable[[AlgorithmSnapshot], None]] = None,
        on_complete: Optional[Callable[[DijkstraRun], None]] = None,
    ):
        self.scheduler:   Scheduler    = scheduler if scheduler is not None else TickScheduler()
        self.mode:        PlaybackMode = PlaybackMode.IDLE
        self.interval_ms: int          = max(MIN_AUTORUN_MS, interval_ms)
        self.on_step      = on_step
        self.on_complete  = on_complete

        self._run:        Optional[DijkstraRun] = None
        self._cursor:     int                   = -1
        self._timer:      Optional[TimerHandle] = None
        self._generation: int                   = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, run: DijkstraRun) -> None:
        """Load a finished run at snapshot 0 and begin auto-advance."""
        self._cancel_timer()
        self._run    = run
        self.mode    = PlaybackMode.RUNNING
        logger.info("playback started: %d snapshots, interval %d ms", len(run), self.interval_ms)
        self._goto(0)
        if self.mode == PlaybackMode.RUNNING:
            self._schedule()

    def stop(self) -> None:
        """Back to IDLE.  The run and cursor are discarded."""
        self._cancel_timer()
        if self.mode != PlaybackMode.IDLE:
            logger.info("playback stopped")
        self._run    = None
        self._cursor = -1
        self.mode    = PlaybackMode.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one snapshot and pause.  False if idle or already at the end."""
        if not self.is_active:
            return False
        self._pause()
        if self.at_end:
            return False
        self._goto(self._cursor + 1)
        return True

    def step_backward(self) -> bool:
        """Rewind one snapshot and pause.  False if idle or already at the start."""
        if not self.is_active:
            return False
        self._pause()
        if self.at_start:
            return False
        self._goto(self._cursor - 1)
        return True

    def skip_to_end(self) -> bool:
        if not self.is_active:
            return False
        self._pause()
        if not self.at_end:
            self._goto(self.last_index)
        return True

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        if self.mode != PlaybackMode.RUNNING:
            return False
        self._pause()
        return True

    def resume(self) -> bool:
        if self.mode != PlaybackMode.PAUSED or self.at_end:
            return False
        self.mode = PlaybackMode.RUNNING
        self._schedule()
        return True

    def toggle(self) -> bool:
        if self.mode == PlaybackMode.RUNNING:
            return self.pause()
        return self.resume()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_autorun_interval(self, ms: int) -> None:
        self.interval_ms = max(MIN_AUTORUN_MS, int(ms))
        if self.mode == PlaybackMode.RUNNING:
            logger.debug("rescheduling auto-advance at %d ms", self.interval_ms)
            self._schedule()

    def set_speed(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            raise ValueError(f"Unknown speed preset: {preset!r}")
        self.set_autorun_interval(SPEED_PRESETS[preset])

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def run(self) -> Optional[DijkstraRun]:
        return self._run

    @property
    def cursor(self) -> Optional[int]:
        return self._cursor if self._run is not None else None

    @property
    def length(self) -> int:
        return len(self._run) if self._run is not None else 0

    @property
    def last_index(self) -> int:
        return self.length - 1

    @property
    def current_snapshot(self) -> Optional[AlgorithmSnapshot]:
        if self._run is None:
            return None
        return self._run.snapshots[self._cursor]

    @property
    def is_active(self) -> bool:
        return self.mode in (PlaybackMode.RUNNING, PlaybackMode.PAUSED)

    @property
    def is_running(self) -> bool:
        return self.mode == PlaybackMode.RUNNING

    @property
    def at_start(self) -> bool:
        return self.is_active and self._cursor == 0

    @property
    def at_end(self) -> bool:
        return self.is_active and self._cursor == self.last_index

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _pause(self) -> None:
        self._cancel_timer()
        self.mode = PlaybackMode.PAUSED

    def _schedule(self) -> None:
        self._cancel_timer()
        generation = self._generation
        self._timer = self.scheduler.call_later(
            self.interval_ms / 1000.0, lambda: self._on_timer(generation)
        )

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        if generation != self._generation or self.mode != PlaybackMode.RUNNING:
            return
        self._timer = None
        self._goto(self._cursor + 1)
        if self.mode == PlaybackMode.RUNNING:
            self._schedule()

    def _goto(self, idx: int) -> None:
        self._cursor = idx
        snapshot = self._run.snapshots[idx]
        logger.debug("cursor → %d/%d (%s)", idx, self.last_index, snapshot.kind)
        if self.on_step is not None:
            self.on_step(snapshot)
        if idx == self.last_index:
            self._cancel_timer()
            self.mode = PlaybackMode.PAUSED
            logger.info("playback reached the final snapshot")
            if self.on_complete is not None:
                self.on_complete(self._run)
