"""Device-side protocols the capture layer binds to.

The interview runs wherever a camera lives (a browser bridge, a kiosk agent,
a test harness). Those hosts implement these protocols; the core never talks
to hardware directly.
"""
from __future__ import annotations

from typing import Optional, Protocol


class CaptureError(RuntimeError):
    """Base error for device and recorder failures."""


class DeviceUnavailableError(CaptureError):
    """No capture API, permission denied, or no device present."""


class RecorderUnavailableError(CaptureError):
    """The recorder could not be constructed or finalized."""


class MediaStream(Protocol):
    """An acquired audio+video input stream."""

    def stop(self) -> None: ...


class MediaDevices(Protocol):
    async def get_user_media(self, *, audio: bool, video: bool) -> MediaStream: ...


class Recorder(Protocol):
    """Buffers encoded chunks from a stream between ``start`` and ``stop``."""

    def start(self) -> None: ...

    async def stop(self) -> list[bytes]: ...


class RecorderFactory(Protocol):
    def is_type_supported(self, mime_type: str) -> bool: ...

    def create(
        self,
        stream: MediaStream,
        *,
        mime_type: str,
        video_bits_per_second: int,
        audio_bits_per_second: int,
    ) -> Recorder: ...


def release_stream(stream: Optional[MediaStream]) -> None:
    """Stop every track of ``stream``; a no-op for ``None``."""

    if stream is not None:
        stream.stop()
