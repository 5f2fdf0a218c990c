"""Scripting facade that records a scene into a timeline plus element metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .errors import ConfigurationError
from .techniques import Technique
from .themes import Theme, dark_theme, get_theme
from .timeline import DEFAULT_FPS, Timeline
from .types import (
    AnimationSegment,
    ClipSegment,
    Direction,
    ElementRecord,
    MetricKind,
    NarrationSegment,
    SectionKind,
    ShowKind,
    SilenceSegment,
    StepsKind,
    TitleKind,
)

logger = logging.getLogger(__name__)

BEAT_DURATION = 0.3
BREATH_DURATION = 0.8
DEFAULT_WORDS_PER_MINUTE = 150.0


@dataclass(frozen=True)
class AnimationRecord:
    technique: Technique
    start: float
    duration: float
    anchor: int
    targets: Tuple[int, ...]

    def progress_at(self, t: float) -> float:
        if self.duration <= 0:
            return 1.0 if t >= self.start else 0.0
        return min(1.0, max(0.0, (t - self.start) / self.duration))


def estimate_narration_seconds(text: str, words_per_minute: float = DEFAULT_WORDS_PER_MINUTE) -> float:
    words = max(1, len(text.split()))
    return words * 60.0 / words_per_minute


class Scene:
    """Records script calls (``narrate``, ``title``, ``play``, ...) in call order.

    Elements are stamped with the timeline position at which they were
    created; ``play`` animates every element minted since the previous
    ``play`` call (or the latest element when none are pending).
    """

    def __init__(
        self,
        fps: int = DEFAULT_FPS,
        theme: Optional[Theme] = None,
        words_per_minute: float = DEFAULT_WORDS_PER_MINUTE,
    ) -> None:
        if words_per_minute <= 0:
            raise ConfigurationError(f"words_per_minute must be positive, got {words_per_minute}")
        self._timeline = Timeline(fps=fps)
        self._theme = theme or dark_theme()
        self._words_per_minute = words_per_minute
        self._records: List[ElementRecord] = []
        self._animations: List[AnimationRecord] = []
        self._pending: List[int] = []
        self._next_id = 0

    # --- state -------------------------------------------------------------

    @property
    def timeline(self) -> Timeline:
        return self._timeline

    @property
    def elements(self) -> List[ElementRecord]:
        return list(self._records)

    @property
    def animations(self) -> List[AnimationRecord]:
        return list(self._animations)

    @property
    def theme(self) -> Theme:
        return self._theme

    def now(self) -> float:
        return self._timeline.total_duration()

    # --- narration and pacing ---------------------------------------------

    def narrate(self, text: str) -> None:
        duration = estimate_narration_seconds(text, self._words_per_minute)
        self._timeline.append(NarrationSegment(text=text, duration=duration))

    def beat(self) -> None:
        self.wait(BEAT_DURATION)

    def breath(self) -> None:
        self.wait(BREATH_DURATION)

    def wait(self, seconds: float) -> None:
        self._timeline.append(SilenceSegment(duration=seconds))

    def clip(self, path: Union[str, Path], duration: float) -> None:
        self._timeline.append(ClipSegment(path=Path(path), duration=duration))

    # --- elements ------------------------------------------------------------

    def title(self, text: str) -> int:
        return self._mint(TitleKind(), text)

    def show(self, text: str) -> int:
        return self._mint(ShowKind(), text)

    def section(self, text: str) -> int:
        return self._mint(SectionKind(), text)

    def metric(self, label: str, value: str, direction: Union[str, Direction] = Direction.NEUTRAL) -> int:
        return self._mint(MetricKind(direction=Direction(direction)), f"{label}: {value}")

    def steps(self, items: Sequence[str]) -> int:
        return self._mint(StepsKind(count=len(items)), "", items=list(items))

    def clear(self) -> None:
        """Retire every visible element; later layout starts from an empty slate."""
        now = self.now()
        anchor = len(self._timeline)
        self._records = [
            record if record.cleared_at is not None else record.model_copy(update={"cleared_at": now, "cleared_anchor": anchor})
            for record in self._records
        ]
        self._pending = []

    # --- animation and styling ---------------------------------------------

    def play(self, technique: Technique) -> None:
        if self._pending:
            targets = tuple(self._pending)
        else:
            active = [r.id for r in self._records if r.cleared_at is None]
            targets = tuple(active[-1:])
        anchor = len(self._timeline)
        start = self.now()
        duration = technique.duration()
        self._timeline.append(AnimationSegment(name=technique.name(), duration=duration))
        self._animations.append(
            AnimationRecord(technique=technique, start=start, duration=duration, anchor=anchor, targets=targets)
        )
        self._pending = []

    def set_theme(self, theme: Union[str, Theme]) -> None:
        self._theme = get_theme(theme) if isinstance(theme, str) else theme

    # --- duration resolution -------------------------------------------------

    def resolve_narration_durations(self, durations: Sequence[float]) -> None:
        """Swap estimated narration lengths for measured ones and re-time records."""
        before = self._timeline.total_duration()
        self._timeline.resolve_narration_durations(durations)
        offset_of = self._timeline.offset_of
        self._records = [
            record.model_copy(
                update={
                    "created_at": offset_of(record.anchor),
                    "cleared_at": offset_of(record.cleared_anchor) if record.cleared_anchor is not None else None,
                }
            )
            for record in self._records
        ]
        self._animations = [replace(anim, start=offset_of(anim.anchor)) for anim in self._animations]
        logger.debug("Resolved %d narration durations: %.2fs -> %.2fs", len(durations), before, self.now())

    def _mint(self, kind, content: str, items: Optional[List[str]] = None) -> int:
        element_id = self._next_id
        self._next_id += 1
        self._records.append(
            ElementRecord(
                id=element_id,
                kind=kind,
                content=content,
                items=items or [],
                created_at=self.now(),
                anchor=len(self._timeline),
            )
        )
        self._pending.append(element_id)
        return element_id


SceneScript = Callable[[Scene], None]
