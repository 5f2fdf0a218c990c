from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

from pydantic import BaseModel, Field

from ..errors import BridgeLaunchError


class BridgeConfig(BaseModel):
    width: int = Field(1920, gt=0)
    height: int = Field(1080, gt=0)
    launch_timeout: float = Field(20.0, gt=0, description="Seconds allowed for launch()")


class RenderBridge(ABC):
    """Turns a serialized FrameState into encoded image bytes.

    ``launch`` must leave the bridge ready to accept frames (its frame-setter
    in place) or raise :class:`~scenereel.errors.BridgeLaunchError`.
    """

    image_extension = "png"

    @abstractmethod
    async def launch(self, config: BridgeConfig) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def capture_frame(self, frame_json: str) -> bytes:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @asynccontextmanager
    async def session(self, config: BridgeConfig) -> AsyncIterator["RenderBridge"]:
        try:
            await asyncio.wait_for(self.launch(config), timeout=config.launch_timeout)
        except asyncio.TimeoutError:
            await self.close()
            raise BridgeLaunchError(
                f"rendering bridge did not start within {config.launch_timeout:.0f}s",
                hint="Increase launch_timeout or check the bridge installation.",
            ) from None
        try:
            yield self
        finally:
            await self.close()
