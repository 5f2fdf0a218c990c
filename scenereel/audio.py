from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import soundfile as sf

from .errors import AudioMismatchError, ConfigurationError, StorageError
from .timeline import Timeline
from .types import NarrationSegment

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 48000


@dataclass
class AudioClip:
    """Interleaved float32 PCM samples in [-1, 1]."""

    data: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    sample_rate: int = DEFAULT_SAMPLE_RATE
    channels: int = 1

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=np.float32).reshape(-1)
        if self.sample_rate <= 0 or self.channels <= 0:
            raise ConfigurationError(
                f"invalid audio format: {self.sample_rate} Hz, {self.channels} channel(s)"
            )

    @classmethod
    def silence(cls, duration: float, sample_rate: int = DEFAULT_SAMPLE_RATE, channels: int = 1) -> "AudioClip":
        frames = int(max(0.0, duration) * sample_rate)
        return cls(np.zeros(frames * channels, dtype=np.float32), sample_rate, channels)

    @property
    def duration(self) -> float:
        return len(self.data) / float(self.sample_rate * self.channels)

    def check_compatible(self, other: "AudioClip") -> None:
        if self.sample_rate != other.sample_rate:
            raise AudioMismatchError("sample rate", self.sample_rate, other.sample_rate)
        if self.channels != other.channels:
            raise AudioMismatchError("channel count", self.channels, other.channels)

    def append(self, other: "AudioClip") -> "AudioClip":
        """Return a new clip with ``other`` appended; formats must match."""
        self.check_compatible(other)
        return AudioClip(np.concatenate([self.data, other.data]), self.sample_rate, self.channels)

    @classmethod
    def concat(cls, clips: Sequence["AudioClip"], sample_rate: int, channels: int = 1) -> "AudioClip":
        # Validate everything first so a mismatch never yields partial output.
        result = cls(sample_rate=sample_rate, channels=channels)
        for clip in clips:
            result.check_compatible(clip)
        if not clips:
            return result
        return cls(np.concatenate([clip.data for clip in clips]), sample_rate, channels)

    def to_wav_bytes(self) -> bytes:
        frames = np.clip(self.data, -1.0, 1.0).reshape(-1, self.channels)
        buf = io.BytesIO()
        sf.write(buf, frames, self.sample_rate, format="WAV", subtype="PCM_16")
        return buf.getvalue()

    def write_wav(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        try:
            path.write_bytes(self.to_wav_bytes())
        except OSError as exc:
            raise StorageError("write audio track", path, exc) from exc
        return path

    @classmethod
    def read_wav(cls, path: Union[str, Path]) -> "AudioClip":
        """Load any PCM or float WAV that libsndfile understands as float32 samples."""
        path = Path(path)
        try:
            with open(path, "rb") as f:
                with sf.SoundFile(f) as sound_file:
                    frames = sound_file.read(dtype="float32", always_2d=True)
                    rate = sound_file.samplerate
        except OSError as exc:
            raise StorageError("read audio file", path, exc) from exc
        except (sf.SoundFileError, RuntimeError) as exc:
            raise ConfigurationError(f"{path} is not a readable audio file: {exc}") from exc
        return cls(frames.reshape(-1), rate, frames.shape[1])


def assemble_audio_track(
    timeline: Timeline,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    narration_clips: Optional[Sequence[AudioClip]] = None,
    channels: int = 1,
) -> AudioClip:
    """Splice narration clips into a silence skeleton following segment order.

    Narration segments take the clip with the same narration index when
    ``narration_clips`` is given; every other segment becomes silence.
    """
    pieces = []
    narration_index = 0
    for segment in timeline.segments:
        if isinstance(segment, NarrationSegment):
            if narration_clips is not None and narration_index < len(narration_clips):
                pieces.append(narration_clips[narration_index])
            else:
                pieces.append(AudioClip.silence(segment.duration, sample_rate, channels))
            narration_index += 1
        else:
            pieces.append(AudioClip.silence(segment.duration, sample_rate, channels))
    track = AudioClip.concat(pieces, sample_rate, channels)
    logger.debug("Assembled %.2fs audio track from %d segments", track.duration, len(pieces))
    return track
