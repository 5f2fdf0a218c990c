from __future__ import annotations

from dataclasses import dataclass

from ..easing import lerp
from ..types import TechniqueOutput
from .base import Technique


@dataclass(frozen=True)
class Slide(Technique):
    duration_seconds: float = 0.5
    offset_x: float = 100.0
    offset_y: float = 0.0

    def name(self) -> str:
        return "Slide"

    def duration(self) -> float:
        return self.duration_seconds

    def apply(self, progress: float) -> TechniqueOutput:
        remaining = 1.0 - progress
        return TechniqueOutput(translate_x=self.offset_x * remaining, translate_y=self.offset_y * remaining)


@dataclass(frozen=True)
class Scale(Technique):
    duration_seconds: float = 0.4
    start: float = 0.0
    end: float = 1.0

    def name(self) -> str:
        return "Scale"

    def duration(self) -> float:
        return self.duration_seconds

    def apply(self, progress: float) -> TechniqueOutput:
        return TechniqueOutput(scale=lerp(self.start, self.end, progress))
