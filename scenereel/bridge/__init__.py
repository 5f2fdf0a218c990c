from .base import BridgeConfig, RenderBridge
from .pillow import PillowBridge

__all__ = ["BridgeConfig", "RenderBridge", "PillowBridge"]
