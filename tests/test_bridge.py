"""Tests for the Pillow rendering bridge and the bridge session lifecycle."""

import asyncio
import io

import pytest
from PIL import Image

from scenereel.bridge import BridgeConfig, PillowBridge, RenderBridge
from scenereel.errors import BridgeLaunchError, CaptureError, ExternalProcessError
from scenereel.facade import Scene
from scenereel.frame import compute_frame_state
from scenereel.techniques import FadeIn, Stagger


class SlowBridge(RenderBridge):
    def __init__(self):
        self.closed = False

    async def launch(self, config):
        await asyncio.sleep(10)

    async def capture_frame(self, frame_json):
        return b""

    async def close(self):
        self.closed = True


def _frame_json():
    m = Scene()
    m.title("Pillow")
    m.steps(["one", "two"])
    m.play(Stagger(FadeIn(), count=2))
    m.narrate("caption text")
    return compute_frame_state(m, 0.3).to_json()


class TestPillowBridge:
    def test_renders_png_at_configured_size(self):
        async def scenario():
            bridge = PillowBridge()
            async with bridge.session(BridgeConfig(width=320, height=180)):
                assert bridge.is_open
                data = await bridge.capture_frame(_frame_json())
            assert not bridge.is_open
            return data

        image = Image.open(io.BytesIO(asyncio.run(scenario())))
        assert image.format == "PNG"
        assert image.size == (320, 180)

    def test_capture_before_launch(self):
        with pytest.raises(ExternalProcessError):
            asyncio.run(PillowBridge().capture_frame(_frame_json()))

    def test_invalid_frame_state(self):
        async def scenario():
            bridge = PillowBridge()
            async with bridge.session(BridgeConfig(width=64, height=64)):
                await bridge.capture_frame('{"time": "soon"}')

        with pytest.raises(CaptureError, match="frame 0"):
            asyncio.run(scenario())


class TestSession:
    def test_launch_timeout_closes_bridge(self):
        bridge = SlowBridge()

        async def scenario():
            async with bridge.session(BridgeConfig(width=64, height=64, launch_timeout=0.05)):
                pass

        with pytest.raises(BridgeLaunchError):
            asyncio.run(scenario())
        assert bridge.closed

    def test_close_runs_when_body_fails(self):
        bridge = SlowBridge()
        bridge.launch = lambda config: asyncio.sleep(0)

        async def scenario():
            async with bridge.session(BridgeConfig(width=64, height=64)):
                raise ValueError("boom")

        with pytest.raises(ValueError):
            asyncio.run(scenario())
        assert bridge.closed
