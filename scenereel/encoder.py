"""FFmpeg-backed video encoding and audio muxing."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from .errors import EncodeError, EncodeInputError, FfmpegNotFoundError

logger = logging.getLogger(__name__)

FRAME_PATTERN = "frame_%06d.{ext}"
DEFAULT_CRF = 23


def frame_filename(index: int, ext: str = "png") -> str:
    return f"frame_{index:06d}.{ext}"


class EncodeConfig(BaseModel):
    input_dir: Path
    output_path: Path
    fps: int = 30
    width: int = 1920
    height: int = 1080
    crf: int = DEFAULT_CRF
    frame_ext: str = "png"

    def validate_input(self) -> None:
        if not self.input_dir.exists():
            raise EncodeInputError(f"input directory does not exist: {self.input_dir}")
        if not self.input_dir.is_dir():
            raise EncodeInputError(f"input path is not a directory: {self.input_dir}")
        if not any(self.input_dir.glob(f"frame_*.{self.frame_ext}")):
            raise EncodeInputError(f"no frame_*.{self.frame_ext} files found in {self.input_dir}")
        if not 0 <= self.crf <= 51:
            raise EncodeInputError(f"CRF must be 0-51, got {self.crf}")
        if self.fps <= 0:
            raise EncodeInputError("FPS must be greater than 0")
        if self.width <= 0 or self.height <= 0:
            raise EncodeInputError(f"resolution must be non-zero, got {self.width}x{self.height}")

    def ffmpeg_args(self) -> List[str]:
        pattern = self.input_dir / FRAME_PATTERN.format(ext=self.frame_ext)
        return [
            "-y",
            "-framerate", str(self.fps),
            "-i", str(pattern),
            "-c:v", "libx264",
            "-pix_fmt", "yuv420p",
            "-crf", str(self.crf),
            "-vf", f"scale={self.width}:{self.height}",
            str(self.output_path),
        ]


def mux_args(video_path: Path, audio_path: Path, output_path: Path) -> List[str]:
    return [
        "-y",
        "-i", str(video_path),
        "-i", str(audio_path),
        "-c:v", "copy",
        "-c:a", "aac",
        "-b:a", "192k",
        "-shortest",
        str(output_path),
    ]


class FfmpegEncoder:
    """Locates ffmpeg and runs it as an asyncio subprocess.

    Lookup order: explicit ``binary``, ``SCENEREEL_FFMPEG``, ``PATH``, then
    the binary bundled with imageio-ffmpeg.
    """

    def __init__(self, binary: Optional[Union[str, Path]] = None) -> None:
        self.binary = str(binary) if binary else None
        self._resolved: Optional[str] = None

    def detect(self) -> str:
        if self._resolved:
            return self._resolved
        candidate = self.binary or os.getenv("SCENEREEL_FFMPEG")
        if candidate:
            found = shutil.which(candidate) or (candidate if Path(candidate).is_file() else None)
            if not found:
                raise FfmpegNotFoundError(candidate)
            self._resolved = found
            return found
        found = shutil.which("ffmpeg")
        if not found:
            try:
                import imageio_ffmpeg

                found = imageio_ffmpeg.get_ffmpeg_exe()
            except (ImportError, RuntimeError):
                raise FfmpegNotFoundError("ffmpeg") from None
        self._resolved = found
        logger.debug("Using ffmpeg at %s", found)
        return found

    async def encode(self, config: EncodeConfig) -> Path:
        config.validate_input()
        await self._run(config.ffmpeg_args(), "encoding")
        return config.output_path

    async def mux_audio(self, video_path: Path, audio_path: Path, output_path: Path) -> Path:
        for path in (video_path, audio_path):
            if not Path(path).is_file():
                raise EncodeInputError(f"mux input does not exist: {path}")
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        await self._run(mux_args(Path(video_path), Path(audio_path), Path(output_path)), "muxing")
        return Path(output_path)

    async def _run(self, args: Sequence[str], action: str) -> None:
        binary = self.detect()
        logger.info("FFmpeg %s: %s %s", action, binary, " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise FfmpegNotFoundError(binary) from None
        except OSError as exc:
            raise EncodeError(f"failed to spawn FFmpeg process: {exc}") from exc
        _stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            stderr_text = stderr.decode(errors="replace")
            logger.error("FFmpeg %s failed with exit code %s", action, proc.returncode)
            raise EncodeError(
                f"FFmpeg {action} failed with exit code {proc.returncode}",
                returncode=proc.returncode,
                stderr=stderr_text,
                hint="See the FFmpeg output above; the frames directory can be kept with --keep-frames.",
            )
