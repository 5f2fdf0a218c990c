from __future__ import annotations

from dataclasses import dataclass

from ..easing import clamp
from ..types import TechniqueOutput
from .base import Technique


@dataclass(frozen=True)
class FadeIn(Technique):
    duration_seconds: float = 0.5

    def name(self) -> str:
        return "FadeIn"

    def duration(self) -> float:
        return self.duration_seconds

    def apply(self, progress: float) -> TechniqueOutput:
        return TechniqueOutput(opacity=clamp(progress, 0.0, 1.0))


@dataclass(frozen=True)
class FadeUp(Technique):
    duration_seconds: float = 0.6
    distance: float = 30.0

    def name(self) -> str:
        return "FadeUp"

    def duration(self) -> float:
        return self.duration_seconds

    def apply(self, progress: float) -> TechniqueOutput:
        # Eased progress may overshoot; opacity stays within [0, 1].
        return TechniqueOutput(opacity=clamp(progress, 0.0, 1.0), translate_y=self.distance * (1.0 - progress))
