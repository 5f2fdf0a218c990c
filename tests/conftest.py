from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pytest

from scenereel.bridge import BridgeConfig, RenderBridge
from scenereel.encoder import EncodeConfig, FfmpegEncoder


class FakeBridge(RenderBridge):
    """Records lifecycle calls and returns placeholder image bytes."""

    def __init__(self, fail_at: Optional[int] = None) -> None:
        self.fail_at = fail_at
        self.launched = False
        self.closed = False
        self.frames: List[str] = []

    async def launch(self, config: BridgeConfig) -> None:
        self.launched = True

    async def capture_frame(self, frame_json: str) -> bytes:
        if self.fail_at is not None and len(self.frames) == self.fail_at:
            raise RuntimeError("renderer crashed")
        self.frames.append(frame_json)
        return b"\x89PNG fake"

    async def close(self) -> None:
        self.closed = True


class FakeEncoder(FfmpegEncoder):
    """Validates inputs like the real encoder and writes placeholder outputs."""

    def __init__(self) -> None:
        super().__init__("ffmpeg")
        self.calls: List[str] = []
        self.frame_count = 0

    async def encode(self, config: EncodeConfig) -> Path:
        config.validate_input()
        self.frame_count = len(list(config.input_dir.glob("frame_*.png")))
        config.output_path.write_bytes(b"video")
        self.calls.append("encode")
        return config.output_path

    async def mux_audio(self, video_path: Path, audio_path: Path, output_path: Path) -> Path:
        assert video_path.is_file() and audio_path.is_file()
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_bytes(b"final")
        self.calls.append("mux")
        return Path(output_path)


@pytest.fixture
def fake_bridge():
    return FakeBridge()


@pytest.fixture
def fake_encoder():
    return FakeEncoder()
