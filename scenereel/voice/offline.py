from __future__ import annotations

import numpy as np

from ..audio import DEFAULT_SAMPLE_RATE, AudioClip
from ..facade import DEFAULT_WORDS_PER_MINUTE, estimate_narration_seconds
from .base import VoiceBackend


class OfflineVoice(VoiceBackend):
    """Deterministic stand-in for a speech engine.

    Emits a soft tone per narration, paced at ``words_per_minute`` so that
    duration resolution behaves like a real backend without any model files.
    """

    name = "offline"

    def __init__(
        self,
        words_per_minute: float = 165.0,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        frequency: float = 220.0,
        amplitude: float = 0.1,
    ) -> None:
        self.words_per_minute = words_per_minute or DEFAULT_WORDS_PER_MINUTE
        self.sample_rate = sample_rate
        self.frequency = frequency
        self.amplitude = amplitude

    def synthesize(self, text: str) -> AudioClip:
        duration = estimate_narration_seconds(text, self.words_per_minute)
        n = int(duration * self.sample_rate)
        t = np.arange(n, dtype=np.float32) / self.sample_rate
        tone = self.amplitude * np.sin(2 * np.pi * self.frequency * t)
        # 10ms fades keep clip boundaries click-free.
        ramp = min(n // 2, int(0.01 * self.sample_rate))
        if ramp > 0:
            envelope = np.linspace(0.0, 1.0, ramp, dtype=np.float32)
            tone[:ramp] *= envelope
            tone[-ramp:] *= envelope[::-1]
        return AudioClip(tone.astype(np.float32), self.sample_rate, 1)
