from __future__ import annotations

import asyncio
import importlib
import importlib.util
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich import print
from rich.console import Console
from rich.table import Table

from .build import build_video
from .config import BuildSettings, load_settings, resolve_path
from .demo import demo_scene
from .encoder import FfmpegEncoder
from .errors import ConfigurationError, SceneReelError
from .facade import DEFAULT_WORDS_PER_MINUTE, Scene, SceneScript
from .frame import compute_frame_state
from .logging_utils import setup_logging
from .themes import THEMES, get_theme
from .timeline import DEFAULT_FPS
from .types import BuildConfig
from .voice import VOICES, FileVoice, VoiceBackend

app = typer.Typer(add_completion=False, no_args_is_help=True)
err_console = Console(stderr=True)


def load_script(reference: str) -> SceneScript:
    """Resolve ``demo``, ``package.module:function`` or ``path/to/file.py:function``."""
    if reference == "demo":
        return demo_scene
    module_ref, sep, attr = reference.rpartition(":")
    if not sep or not module_ref or not attr:
        raise ConfigurationError(
            f"invalid scene reference: {reference!r}",
            hint="Use 'module:function', 'file.py:function' or 'demo'.",
        )
    try:
        if module_ref.endswith(".py"):
            spec = importlib.util.spec_from_file_location(Path(module_ref).stem, module_ref)
            if spec is None or spec.loader is None:
                raise ImportError(f"cannot load {module_ref}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        else:
            module = importlib.import_module(module_ref)
    except (ImportError, OSError) as exc:
        raise ConfigurationError(f"cannot import scene module {module_ref!r}: {exc}") from exc
    script = getattr(module, attr, None)
    if not callable(script):
        raise ConfigurationError(f"{module_ref!r} has no callable named {attr!r}")
    return script


def load_scene(reference: str, fps: int, theme: str, words_per_minute: float) -> Scene:
    scene = Scene(fps=fps, theme=get_theme(theme), words_per_minute=words_per_minute)
    load_script(reference)(scene)
    return scene


def make_voice(name: Optional[str], manifest: Optional[str], sample_rate: int) -> Optional[VoiceBackend]:
    if manifest:
        return FileVoice.from_manifest(manifest)
    if not name or name == "none":
        return None
    if name not in VOICES:
        raise ConfigurationError(f"Unknown voice backend: {name}", hint="Available voices: " + ", ".join(VOICES))
    return VOICES[name](sample_rate=sample_rate)


def _run(action) -> Any:
    try:
        return action()
    except SceneReelError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {exc.describe()}")
        raise typer.Exit(code=1)


@app.command()
def build(
    scene: Optional[str] = typer.Argument(None, help="Scene to build: 'module:function', 'file.py:function' or 'demo'"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output MP4 path"),
    width: Optional[int] = typer.Option(None, help="Output width (default 1920)"),
    height: Optional[int] = typer.Option(None, help="Output height (default 1080)"),
    fps: Optional[int] = typer.Option(None, help="Frames per second (default 30)"),
    crf: Optional[int] = typer.Option(None, help="x264 quality, 0-51 (default 23)"),
    sample_rate: Optional[int] = typer.Option(None, help="Audio sample rate (default 48000)"),
    theme: Optional[str] = typer.Option(None, help="Theme: " + ", ".join(THEMES)),
    voice: Optional[str] = typer.Option(None, help="Voice backend: none, " + ", ".join(VOICES)),
    voice_manifest: Optional[str] = typer.Option(None, help="YAML mapping narration text to WAV recordings"),
    words_per_minute: Optional[float] = typer.Option(None, help="Narration pacing estimate"),
    keep_frames: Optional[bool] = typer.Option(None, "--keep-frames/--no-keep-frames", help="Keep the working directory"),
    work_dir: Optional[str] = typer.Option(None, help="Parent directory for the working directory"),
    ffmpeg: Optional[str] = typer.Option(None, help="Path to the ffmpeg binary"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    prefer_config: bool = typer.Option(False, help="If true, config overrides CLI when set"),
    log_level: Optional[str] = typer.Option(None, help="Logging level (default WARNING)"),
):
    """Render a scene to an MP4 with narration audio."""
    load_dotenv()
    cfg: BuildSettings = _run(lambda: load_settings(config)) if config else BuildSettings()

    def choose(val, cfg_val, default=None):
        if prefer_config and cfg_val is not None:
            return cfg_val
        if val is not None:
            return val
        return cfg_val if cfg_val is not None else default

    setup_logging(choose(log_level, cfg.log_level, "WARNING"))
    scene_ref = choose(scene, cfg.scene)
    if not scene_ref:
        raise typer.BadParameter("scene is required (as an argument or via --config)")
    fps = int(choose(fps, cfg.fps, DEFAULT_FPS))
    sample_rate = int(choose(sample_rate, cfg.sample_rate, 48000))
    theme_name = choose(theme, cfg.theme, "dark")
    wpm = float(choose(words_per_minute, cfg.words_per_minute, DEFAULT_WORDS_PER_MINUTE))

    def run_build():
        m = load_scene(scene_ref, fps, theme_name, wpm)
        build_config = BuildConfig(
            output_path=Path(choose(output, cfg.output, "output.mp4")),
            width=int(choose(width, cfg.width, 1920)),
            height=int(choose(height, cfg.height, 1080)),
            crf=int(choose(crf, cfg.crf, 23)),
            sample_rate=sample_rate,
            keep_frames=bool(choose(keep_frames, cfg.keep_frames, False)),
            work_dir=resolve_path(choose(work_dir, cfg.work_dir)),
        )
        voice_backend = make_voice(choose(voice, cfg.voice), choose(voice_manifest, cfg.voice_manifest), sample_rate)
        encoder = FfmpegEncoder(choose(ffmpeg, cfg.ffmpeg_path))
        return asyncio.run(build_video(m, build_config, encoder=encoder, voice=voice_backend))

    result = _run(run_build)
    if result.work_dir is not None:
        print(f"[bold green]Frames kept in[/bold green] {result.work_dir}")


@app.command()
def info(
    scene: str = typer.Argument(..., help="Scene reference"),
    fps: int = typer.Option(DEFAULT_FPS, help="Frames per second"),
    words_per_minute: float = typer.Option(DEFAULT_WORDS_PER_MINUTE, help="Narration pacing estimate"),
):
    """Show the timeline of a scene without rendering."""
    m = _run(lambda: load_scene(scene, fps, "dark", words_per_minute))
    timeline = m.timeline
    table = Table(title=f"{scene}: {timeline.total_duration():.2f}s, {timeline.total_frames()} frames @ {fps} fps")
    table.add_column("#", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Type")
    table.add_column("Detail")
    for index, segment in enumerate(timeline.segments):
        detail = getattr(segment, "text", None) or getattr(segment, "name", None) or str(getattr(segment, "path", ""))
        table.add_row(
            str(index),
            f"{timeline.offset_of(index):.2f}",
            f"{segment.duration:.2f}",
            segment.type,
            detail,
        )
    Console().print(table)
    print(f"[bold green]Elements:[/bold green] {len(m.elements)}  [bold green]Animations:[/bold green] {len(m.animations)}")


@app.command()
def frame(
    scene: str = typer.Argument(..., help="Scene reference"),
    time: float = typer.Option(0.0, "--time", "-t", help="Timestamp in seconds"),
    fps: int = typer.Option(DEFAULT_FPS, help="Frames per second"),
    theme: str = typer.Option("dark", help="Theme: " + ", ".join(THEMES)),
):
    """Print the frame state JSON sent to the renderer at a timestamp."""
    m = _run(lambda: load_scene(scene, fps, theme, DEFAULT_WORDS_PER_MINUTE))
    typer.echo(compute_frame_state(m, time).model_dump_json(by_alias=True, indent=2))


@app.command()
def themes():
    """List the built-in themes."""
    for name in THEMES:
        theme = get_theme(name)
        print(f"[bold]{name}[/bold] ({theme.name}): {len(theme.to_style_properties())} style properties")


if __name__ == "__main__":
    app()
