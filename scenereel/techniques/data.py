from __future__ import annotations

from dataclasses import dataclass

from ..easing import clamp, lerp
from ..types import TechniqueOutput
from .base import Technique


@dataclass(frozen=True)
class CountUp(Technique):
    """Numeric reveal from ``start`` to ``end``.

    The renderer reads the revealed fraction from the opacity channel; use
    :meth:`value_at` for the number itself.
    """

    duration_seconds: float = 1.0
    start: float = 0.0
    end: float = 100.0

    def name(self) -> str:
        return "CountUp"

    def duration(self) -> float:
        return self.duration_seconds

    def apply(self, progress: float) -> TechniqueOutput:
        return TechniqueOutput(opacity=clamp(progress, 0.0, 1.0))

    def value_at(self, progress: float) -> float:
        return lerp(self.start, self.end, clamp(progress, 0.0, 1.0))
