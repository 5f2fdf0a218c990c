"""Exception hierarchy for scene building, rendering and encoding."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SceneReelError(Exception):
    """Base class for every error raised by scenereel.

    ``hint`` carries a short remediation message shown by the CLI.
    """

    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint

    def describe(self) -> str:
        message = str(self)
        if self.hint:
            return f"{message}\nHint: {self.hint}"
        return message


class ConfigurationError(SceneReelError):
    """Raised for bad or missing input, e.g. a scene with nothing to render."""


class EncodeInputError(ConfigurationError):
    """Raised when the encoder is handed an invalid frame directory or settings."""


class ResourceError(SceneReelError):
    """Raised when an external binary or rendering resource is unavailable."""


class FfmpegNotFoundError(ResourceError):
    hint = "Install FFmpeg and make sure it is on your PATH (https://ffmpeg.org/download.html), or set SCENEREEL_FFMPEG."

    def __init__(self, searched: Optional[str] = None) -> None:
        message = "FFmpeg not found"
        if searched:
            message += f" (looked for '{searched}')"
        super().__init__(message)


class BridgeLaunchError(ResourceError):
    """Raised when the rendering bridge cannot be started."""


class ExternalProcessError(SceneReelError):
    """Raised when an external process or bridge operation fails.

    ``stderr`` keeps the captured diagnostic output of the process, if any.
    """

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode = returncode
        self.stderr = stderr

    def describe(self) -> str:
        text = super().describe()
        if self.stderr:
            tail = "\n".join(self.stderr.strip().splitlines()[-10:])
            text += f"\n--- process output ---\n{tail}"
        return text


class EncodeError(ExternalProcessError):
    """Raised when FFmpeg exits with a failure while encoding or muxing."""


class CaptureError(ExternalProcessError):
    """Raised when the rendering bridge fails to capture a frame."""

    def __init__(self, frame: int, message: str) -> None:
        super().__init__(f"frame {frame}: {message}")
        self.frame = frame


class StorageError(SceneReelError):
    """Raised when reading or writing the filesystem fails."""

    def __init__(self, action: str, path: Path, cause: OSError) -> None:
        super().__init__(
            f"failed to {action} {path}: {cause}",
            hint="Check that the location exists, is writable and has free space.",
        )
        self.path = path


class AudioMismatchError(SceneReelError):
    """Raised when audio clips with different formats are combined."""

    def __init__(self, field: str, expected: int, got: int) -> None:
        super().__init__(f"{field} mismatch: expected {expected}, got {got}")
        self.field = field
        self.expected = expected
        self.got = got


class SynthesisError(SceneReelError):
    """Raised when the TTS backend fails on a narration segment."""

    hint = "Check the voice backend configuration or build without a voice."

    def __init__(self, index: int, text: str, cause: BaseException) -> None:
        preview = text if len(text) <= 40 else text[:37] + "..."
        super().__init__(f"speech synthesis failed for narration {index} ('{preview}'): {cause}")
        self.index = index
        self.text = text
