from .base import VoiceBackend
from .files import FileVoice
from .offline import OfflineVoice

VOICES = {
    "offline": OfflineVoice,
}

__all__ = ["VoiceBackend", "FileVoice", "OfflineVoice", "VOICES"]
