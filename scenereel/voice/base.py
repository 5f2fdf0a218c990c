from __future__ import annotations

from abc import ABC, abstractmethod

from ..audio import AudioClip


class VoiceBackend(ABC):
    name: str = "voice"

    @abstractmethod
    def synthesize(self, text: str) -> AudioClip:  # pragma: no cover - interface
        raise NotImplementedError
