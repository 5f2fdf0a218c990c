"""Ordered segment sequence with duration tracking and frame mapping."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import ConfigurationError
from .types import AnimationSegment, ClipSegment, NarrationSegment, Segment, SilenceSegment

DEFAULT_FPS = 30

# Absorbs float noise in time * fps, e.g. 2.8 * 30 or (123 / 30) * 30.
_FRAME_EPSILON = 1e-9


class Timeline:
    """Append-only list of segments; start times are derived from order."""

    def __init__(self, fps: int = DEFAULT_FPS, segments: Optional[Iterable[Segment]] = None) -> None:
        if not isinstance(fps, int) or fps <= 0:
            raise ConfigurationError(f"fps must be a positive integer, got {fps!r}")
        self._fps = fps
        self._segments: List[Segment] = []
        for segment in segments or ():
            self.append(segment)

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def append(self, segment: Segment) -> None:
        duration = segment.duration
        if not math.isfinite(duration) or duration < 0:
            raise ConfigurationError(f"segment duration must be a finite value >= 0, got {duration}")
        self._segments.append(segment)

    def total_duration(self) -> float:
        return sum(segment.duration for segment in self._segments)

    def total_frames(self) -> int:
        duration = self.total_duration()
        if duration <= 0:
            return 0
        return max(1, math.ceil(duration * self._fps - _FRAME_EPSILON))

    def frame_at(self, time: float, fps: Optional[int] = None) -> int:
        """Map seconds to a frame index, clamped to the renderable range."""
        total = self.total_frames()
        if total == 0 or time <= 0:
            return 0
        rate = fps if fps is not None else self._fps
        frame = math.floor(time * rate + _FRAME_EPSILON)
        return min(frame, total - 1)

    def offset_of(self, index: int) -> float:
        """Start time of the segment at ``index``; ``len(self)`` gives the end."""
        if index < 0 or index > len(self._segments):
            raise IndexError(f"segment index out of range: {index}")
        return sum(segment.duration for segment in self._segments[:index])

    def segments_in_range(self, start: float, end: float) -> List[Tuple[float, Segment]]:
        """Segments whose ``[start, start + duration)`` span intersects ``[start, end)``."""
        hits: List[Tuple[float, Segment]] = []
        cursor = 0.0
        for segment in self._segments:
            seg_end = cursor + segment.duration
            if cursor < end and seg_end > start:
                hits.append((cursor, segment))
            cursor = seg_end
            if cursor >= end:
                break
        return hits

    def narration_indices(self) -> List[int]:
        return [i for i, segment in enumerate(self._segments) if isinstance(segment, NarrationSegment)]

    def narration_texts(self) -> List[str]:
        return [segment.text for segment in self._segments if isinstance(segment, NarrationSegment)]

    def resolve_narration_durations(self, durations: Sequence[float]) -> None:
        """Replace narration estimates, in narration order, with measured durations."""
        indices = self.narration_indices()
        if len(durations) != len(indices):
            raise ConfigurationError(
                f"expected {len(indices)} narration durations, got {len(durations)}"
            )
        for duration in durations:
            if not math.isfinite(duration) or duration < 0:
                raise ConfigurationError(f"narration duration must be a finite value >= 0, got {duration}")
        for index, duration in zip(indices, durations):
            self._segments[index] = self._segments[index].model_copy(update={"duration": float(duration)})

    def copy(self) -> "Timeline":
        return Timeline(fps=self._fps, segments=self._segments)


class TimelineBuilder:
    """Fluent construction of a :class:`Timeline`."""

    def __init__(self) -> None:
        self._fps = DEFAULT_FPS
        self._segments: List[Segment] = []

    def fps(self, fps: int) -> "TimelineBuilder":
        self._fps = fps
        return self

    def narration(self, text: str, duration: float) -> "TimelineBuilder":
        self._segments.append(NarrationSegment(text=text, duration=duration))
        return self

    def animation(self, name: str, duration: float) -> "TimelineBuilder":
        self._segments.append(AnimationSegment(name=name, duration=duration))
        return self

    def silence(self, duration: float) -> "TimelineBuilder":
        self._segments.append(SilenceSegment(duration=duration))
        return self

    def clip(self, path: Union[str, Path], duration: float) -> "TimelineBuilder":
        self._segments.append(ClipSegment(path=Path(path), duration=duration))
        return self

    def build(self) -> Timeline:
        return Timeline(fps=self._fps, segments=self._segments)
