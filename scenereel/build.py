"""Build pipeline: scene -> speech -> frames -> video -> audio -> final MP4."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Literal, Optional, Union

from pydantic import BaseModel
from rich.console import Console
from tqdm import tqdm

from .audio import AudioClip, assemble_audio_track
from .bridge import BridgeConfig, PillowBridge, RenderBridge
from .encoder import EncodeConfig, FfmpegEncoder, frame_filename
from .errors import CaptureError, ConfigurationError, SceneReelError, StorageError, SynthesisError
from .facade import Scene
from .frame import compute_frame_state
from .types import BuildConfig, BuildResult, LayoutConfig
from .voice import VoiceBackend

logger = logging.getLogger(__name__)


class SceneBuilt(BaseModel):
    event: Literal["scene_built"] = "scene_built"
    total_duration: float
    total_frames: int
    fps: int


class SynthesizingNarration(BaseModel):
    event: Literal["synthesizing"] = "synthesizing"
    current: int
    total: int


class RenderingFrame(BaseModel):
    event: Literal["rendering"] = "rendering"
    current: int
    total: int


class Encoding(BaseModel):
    event: Literal["encoding"] = "encoding"


class MuxingAudio(BaseModel):
    event: Literal["muxing"] = "muxing"


class Complete(BaseModel):
    event: Literal["complete"] = "complete"
    output_path: Path
    total_frames: int
    duration: float


BuildProgress = Union[SceneBuilt, SynthesizingNarration, RenderingFrame, Encoding, MuxingAudio, Complete]
ProgressCallback = Callable[[BuildProgress], None]


class ConsoleProgress:
    """Default progress reporter: rich status lines plus a tqdm frame bar."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self._bar: Optional[tqdm] = None

    def __call__(self, event: BuildProgress) -> None:
        if isinstance(event, RenderingFrame):
            if self._bar is None:
                self._bar = tqdm(total=event.total, desc="Rendering", unit="frame")
            self._bar.update(1)
            if event.current + 1 >= event.total:
                self.close()
        elif isinstance(event, SceneBuilt):
            self.console.print(
                f"[bold green]Scene:[/bold green] {event.total_duration:.2f}s, "
                f"{event.total_frames} frames at {event.fps} fps"
            )
        elif isinstance(event, SynthesizingNarration):
            self.console.print(f"[cyan]Synthesizing narration {event.current + 1}/{event.total}[/cyan]")
        elif isinstance(event, Encoding):
            self.console.print("[cyan]Encoding video...[/cyan]")
        elif isinstance(event, MuxingAudio):
            self.console.print("[cyan]Muxing audio...[/cyan]")
        elif isinstance(event, Complete):
            self.console.print(
                f"[bold green]Done.[/bold green] Wrote {event.total_frames} frames "
                f"({event.duration:.2f}s) to {event.output_path}"
            )

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


async def synthesize_narrations(
    scene: Scene,
    voice: VoiceBackend,
    report: ProgressCallback,
) -> List[AudioClip]:
    """Synthesize every narration in order; the first failure aborts the batch."""
    texts = scene.timeline.narration_texts()
    clips: List[AudioClip] = []
    for index, text in enumerate(texts):
        report(SynthesizingNarration(current=index, total=len(texts)))
        try:
            clip = await asyncio.to_thread(voice.synthesize, text)
        except Exception as exc:
            raise SynthesisError(index, text, exc) from exc
        clips.append(clip)
    logger.info("Synthesized %d narrations with %s", len(clips), voice.name)
    return clips


async def render_frames(
    scene: Scene,
    bridge: RenderBridge,
    frames_dir: Path,
    report: ProgressCallback,
    layout: Optional[LayoutConfig] = None,
) -> int:
    """Capture every frame in order into ``frames_dir``; the bridge must be launched."""
    timeline = scene.timeline
    total = timeline.total_frames()
    fps = timeline.fps
    for index in range(total):
        state = compute_frame_state(scene, index / fps, layout)
        try:
            image = await bridge.capture_frame(state.to_json())
        except SceneReelError:
            raise
        except Exception as exc:
            raise CaptureError(index, str(exc)) from exc
        path = frames_dir / frame_filename(index, bridge.image_extension)
        try:
            await asyncio.to_thread(path.write_bytes, image)
        except OSError as exc:
            raise StorageError("write frame", path, exc) from exc
        report(RenderingFrame(current=index, total=total))
    return total


def _require_frames(scene: Scene, message: str) -> None:
    if scene.timeline.total_frames() == 0:
        raise ConfigurationError(message, hint="Add narration, waits or animations to the scene.")


def _make_work_dir(base: Optional[Path]) -> Path:
    try:
        if base is not None:
            base.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="scenereel-build-", dir=base))
    except OSError as exc:
        raise StorageError("create working directory in", base or Path(tempfile.gettempdir()), exc) from exc


async def build_video(
    scene: Scene,
    config: BuildConfig,
    bridge: Optional[RenderBridge] = None,
    encoder: Optional[FfmpegEncoder] = None,
    voice: Optional[VoiceBackend] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> BuildResult:
    report = on_progress or ConsoleProgress()
    _require_frames(scene, "scene has no timeline segments (0 frames to render)")

    clips: Optional[List[AudioClip]] = None
    if voice is not None:
        clips = await synthesize_narrations(scene, voice, report)
        scene.resolve_narration_durations([clip.duration for clip in clips])
        _require_frames(scene, "scene is 0 seconds long after narration synthesis (0 frames to render)")

    timeline = scene.timeline
    total_duration = timeline.total_duration()
    total_frames = timeline.total_frames()
    fps = timeline.fps
    report(SceneBuilt(total_duration=total_duration, total_frames=total_frames, fps=fps))

    work_dir = _make_work_dir(config.work_dir)
    frames_dir = work_dir / "frames"
    bridge = bridge or PillowBridge()
    encoder = encoder or FfmpegEncoder()
    logger.info("Building %s in %s", config.output_path, work_dir)
    try:
        try:
            frames_dir.mkdir()
        except OSError as exc:
            raise StorageError("create frames directory", frames_dir, exc) from exc

        bridge_config = BridgeConfig(width=config.width, height=config.height)
        async with bridge.session(bridge_config):
            await render_frames(scene, bridge, frames_dir, report, config.layout)

        report(Encoding())
        video_only = work_dir / "video_only.mp4"
        await encoder.encode(
            EncodeConfig(
                input_dir=frames_dir,
                output_path=video_only,
                fps=fps,
                width=config.width,
                height=config.height,
                crf=config.crf,
                frame_ext=bridge.image_extension,
            )
        )

        report(MuxingAudio())
        channels = clips[0].channels if clips else 1
        track = assemble_audio_track(timeline, config.sample_rate, clips, channels)
        audio_path = await asyncio.to_thread(track.write_wav, work_dir / "audio.wav")
        await encoder.mux_audio(video_only, audio_path, config.output_path)
    finally:
        if isinstance(report, ConsoleProgress):
            report.close()
        if not config.keep_frames:
            shutil.rmtree(work_dir, ignore_errors=True)

    report(Complete(output_path=config.output_path, total_frames=total_frames, duration=total_duration))
    return BuildResult(
        output_path=config.output_path,
        total_frames=total_frames,
        duration=total_duration,
        work_dir=work_dir if config.keep_frames else None,
    )
