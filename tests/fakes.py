"""In-memory stand-ins for capture devices and recorders."""
from __future__ import annotations

import asyncio
from typing import List, Optional


class FakeStream:
    def __init__(self) -> None:
        self.stop_calls = 0

    @property
    def stopped(self) -> bool:
        return self.stop_calls > 0

    def stop(self) -> None:
        self.stop_calls += 1


class FakeDevices:
    def __init__(self, stream: Optional[FakeStream] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.stream = stream or FakeStream()
        self.error = error
        self.delay = delay
        self.requests = 0

    async def get_user_media(self, *, audio: bool, video: bool) -> FakeStream:
        self.requests += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.stream


class FakeRecorder:
    def __init__(self, chunks: List[bytes], fail_stop: bool = False) -> None:
        self.chunks = chunks
        self.fail_stop = fail_stop
        self.started = False

    def start(self) -> None:
        self.started = True

    async def stop(self) -> List[bytes]:
        if self.fail_stop:
            raise RuntimeError("device revoked")
        return list(self.chunks)


class FakeRecorderFactory:
    def __init__(
        self,
        supported: tuple = ("video/webm;codecs=vp8", "video/webm"),
        fail_create: bool = False,
        fail_stop: bool = False,
        chunks: Optional[List[bytes]] = None,
    ) -> None:
        self.supported = supported
        self.fail_create = fail_create
        self.fail_stop = fail_stop
        self.chunks = chunks if chunks is not None else [b"frame-1", b"", b"frame-2"]
        self.created: List[dict] = []

    def is_type_supported(self, mime_type: str) -> bool:
        return mime_type in self.supported

    def create(self, stream, *, mime_type: str, video_bits_per_second: int, audio_bits_per_second: int) -> FakeRecorder:
        if self.fail_create:
            raise RuntimeError(f"unsupported codec {mime_type}")
        self.created.append(
            {
                "mime_type": mime_type,
                "video_bits_per_second": video_bits_per_second,
                "audio_bits_per_second": audio_bits_per_second,
            }
        )
        return FakeRecorder(self.chunks, fail_stop=self.fail_stop)
