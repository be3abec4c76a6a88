"""
engine/
-------
Playback, recording & prediction layer.

    from engine import PlaybackController, Recorder, PredictionEvaluator
"""

from engine.scheduler  import TickScheduler, TickHandle
from engine.playback   import (
    PlaybackController,
    PlaybackMode,
    SPEED_PRESETS,
    DEFAULT_AUTORUN_MS,
    MIN_AUTORUN_MS,
)
from engine.recorder   import Recorder, RunMetrics, snapshot_to_dict
from engine.prediction import (
    PredictionEvaluator,
    PredictionComparison,
    AdjacencyError,
    compare_prediction,
)

__all__ = [
    "TickScheduler",
    "TickHandle",
    "PlaybackController",
    "PlaybackMode",
    "SPEED_PRESETS",
    "DEFAULT_AUTORUN_MS",
    "MIN_AUTORUN_MS",
    "Recorder",
    "RunMetrics",
    "snapshot_to_dict",
    "PredictionEvaluator",
    "PredictionComparison",
    "AdjacencyError",
    "compare_prediction",
]
