from .build import build_video
from .facade import Scene
from .frame import compute_frame_state
from .timeline import Timeline, TimelineBuilder
from .types import BuildConfig, BuildResult, FrameState

__version__ = "0.1.0"

__all__ = [
    "build_video",
    "Scene",
    "compute_frame_state",
    "Timeline",
    "TimelineBuilder",
    "BuildConfig",
    "BuildResult",
    "FrameState",
]
