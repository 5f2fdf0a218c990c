from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

import yaml

from ..audio import AudioClip
from ..errors import ConfigurationError, StorageError
from .base import VoiceBackend


class FileVoice(VoiceBackend):
    """Serves pre-recorded WAV files keyed by narration text."""

    name = "files"

    def __init__(self, recordings: Dict[str, Union[str, Path]]) -> None:
        self.recordings = {text: Path(path) for text, path in recordings.items()}

    @classmethod
    def from_manifest(cls, manifest_path: Union[str, Path]) -> "FileVoice":
        """Load a YAML mapping of narration text to WAV path (relative to the manifest)."""
        manifest_path = Path(manifest_path)
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise StorageError("read voice manifest", manifest_path, exc) from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"{manifest_path} is not valid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{manifest_path}: expected a mapping of narration text to WAV file")
        base = manifest_path.parent
        return cls({str(text): base / str(path) for text, path in data.items()})

    def synthesize(self, text: str) -> AudioClip:
        path = self.recordings.get(text)
        if path is None:
            raise ConfigurationError(f"no recording for narration: {text!r}")
        return AudioClip.read_wav(path)
