from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


class BuildSettings(BaseModel):
    """Values read from a YAML config file; unset fields fall back to CLI defaults."""

    scene: Optional[str] = Field(None, description="Scene reference, 'module:function' or 'demo'")
    output: Optional[str] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    fps: Optional[int] = Field(None, gt=0)
    crf: Optional[int] = Field(None, ge=0, le=51)
    sample_rate: Optional[int] = Field(None, gt=0)
    theme: Optional[str] = None
    voice: Optional[str] = Field(None, description="Voice backend name, e.g. 'offline'")
    voice_manifest: Optional[str] = Field(None, description="YAML mapping narration text to WAV files")
    words_per_minute: Optional[float] = Field(None, gt=0)
    keep_frames: Optional[bool] = None
    work_dir: Optional[str] = None
    ffmpeg_path: Optional[str] = None
    log_level: Optional[str] = None


def load_settings(path: str) -> BuildSettings:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"config file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    try:
        return BuildSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid config file {path}:\n{exc}") from exc


def resolve_path(value: Optional[str]) -> Optional[Path]:
    return Path(value).expanduser() if value else None
