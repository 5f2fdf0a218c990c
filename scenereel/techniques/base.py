from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from ..easing import Ease, clamp, get_easing
from ..types import TechniqueOutput


class Technique(ABC):
    """Animation primitive mapping normalized progress to a visual transform."""

    @abstractmethod
    def name(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def duration(self) -> float:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def apply(self, progress: float) -> TechniqueOutput:  # pragma: no cover - interface
        raise NotImplementedError

    def with_ease(self, ease: Union[str, Ease]) -> "WithEase":
        return WithEase(inner=self, ease=Ease(ease))


@dataclass(frozen=True)
class WithEase(Technique):
    inner: Technique
    ease: Ease = Ease.LINEAR

    def name(self) -> str:
        return self.inner.name()

    def duration(self) -> float:
        return self.inner.duration()

    def apply(self, progress: float) -> TechniqueOutput:
        curve = get_easing(self.ease)
        return self.inner.apply(curve(clamp(progress, 0.0, 1.0)))
