from __future__ import annotations

from dataclasses import dataclass

from ..easing import clamp
from ..types import TechniqueOutput
from .base import Technique


@dataclass(frozen=True)
class Stagger(Technique):
    """Runs ``inner`` once per item, each item starting ``delay`` seconds later."""

    inner: Technique
    count: int = 1
    delay: float = 0.1

    def name(self) -> str:
        return "Stagger"

    def duration(self) -> float:
        extra = self.delay * (self.count - 1) if self.count > 1 else 0.0
        return self.inner.duration() + extra

    def apply(self, progress: float) -> TechniqueOutput:
        return self.inner.apply(progress)

    def apply_item(self, index: int, progress: float) -> TechniqueOutput:
        """Transform for item ``index``; ``progress`` is measured in units of the inner duration."""
        inner_duration = self.inner.duration()
        shift = index * self.delay / inner_duration if inner_duration > 0 else 0.0
        return self.inner.apply(clamp(progress - shift, 0.0, 1.0))

    def with_count(self, count: int) -> "Stagger":
        return Stagger(inner=self.inner, count=count, delay=self.delay)

    def with_delay(self, delay: float) -> "Stagger":
        return Stagger(inner=self.inner, count=self.count, delay=delay)
