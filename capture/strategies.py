"""Live and simulated capture strategies.

Both produce exactly one ``AnswerArtifact`` per ``start_recording`` /
``stop_recording`` pair. Sessions only ever move from live to simulated.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from agents.types import AnswerArtifact, CaptureMode
from config.settings import Settings, settings as default_settings

from .devices import MediaStream, Recorder, RecorderFactory, RecorderUnavailableError, release_stream
from .probe import ProbeResult

logger = logging.getLogger(__name__)

SIMULATED_CONTENT = b"Simulation Data"
SIMULATED_CONTENT_TYPE = "text/plain"


class CaptureStrategy(ABC):
    mode: CaptureMode

    def __init__(self) -> None:
        self._question_index: Optional[int] = None

    @property
    def is_recording(self) -> bool:
        return self._question_index is not None

    @abstractmethod
    async def start_recording(self, question_index: int) -> None: ...

    @abstractmethod
    async def stop_recording(self) -> AnswerArtifact: ...

    def release(self) -> None:
        """Release held devices. Safe to call repeatedly."""


class LiveCapture(CaptureStrategy):
    mode: CaptureMode = "live"

    def __init__(
        self,
        stream: MediaStream,
        recorder_factory: RecorderFactory,
        *,
        settings: Settings = default_settings,
    ) -> None:
        super().__init__()
        self._stream: Optional[MediaStream] = stream
        self._factory = recorder_factory
        self._settings = settings
        self._recorder: Optional[Recorder] = None
        self._mime_type = settings.FALLBACK_MIME_TYPE

    def negotiate_mime_type(self) -> str:
        preferred = self._settings.PREFERRED_MIME_TYPE
        if self._factory.is_type_supported(preferred):
            return preferred
        return self._settings.FALLBACK_MIME_TYPE

    async def start_recording(self, question_index: int) -> None:
        if self._stream is None:
            raise RecorderUnavailableError("stream already released")
        try:
            mime_type = self.negotiate_mime_type()
            recorder = self._factory.create(
                self._stream,
                mime_type=mime_type,
                video_bits_per_second=self._settings.VIDEO_BITS_PER_SECOND,
                audio_bits_per_second=self._settings.AUDIO_BITS_PER_SECOND,
            )
            recorder.start()
        except Exception as exc:  # noqa: BLE001
            raise RecorderUnavailableError(f"failed to start recorder: {exc}") from exc
        self._recorder = recorder
        self._mime_type = mime_type
        self._question_index = question_index

    async def stop_recording(self) -> AnswerArtifact:
        recorder, index = self._recorder, self._question_index
        self._recorder, self._question_index = None, None
        if recorder is None or index is None:
            raise RecorderUnavailableError("recorder is not running")
        try:
            chunks = await recorder.stop()
        except Exception as exc:  # noqa: BLE001
            raise RecorderUnavailableError(f"failed to finalize recording: {exc}") from exc
        content = b"".join(chunk for chunk in chunks if chunk)
        return AnswerArtifact(question_index=index, content=content, content_type=self._mime_type)

    def release(self) -> None:
        stream, self._stream = self._stream, None
        self._recorder = None
        release_stream(stream)


class SimulatedCapture(CaptureStrategy):
    mode: CaptureMode = "simulated"

    def __init__(self, processing_delay_s: float) -> None:
        super().__init__()
        self._delay = processing_delay_s

    async def start_recording(self, question_index: int) -> None:
        self._question_index = question_index

    async def stop_recording(self) -> AnswerArtifact:
        index = self._question_index
        if index is None:
            raise RuntimeError("simulated recording was never started")
        await asyncio.sleep(self._delay)
        self._question_index = None
        return AnswerArtifact(
            question_index=index,
            content=SIMULATED_CONTENT,
            content_type=SIMULATED_CONTENT_TYPE,
            simulated=True,
        )


def select_strategy(
    probe: ProbeResult,
    recorder_factory: Optional[RecorderFactory],
    *,
    settings: Settings = default_settings,
) -> CaptureStrategy:
    """Pick the strategy for a whole session from the probe outcome."""

    if probe.mode == "live" and probe.stream is not None:
        if recorder_factory is not None:
            return LiveCapture(probe.stream, recorder_factory, settings=settings)
        logger.warning("Stream acquired but no recorder available; using simulated capture")
        release_stream(probe.stream)
    return SimulatedCapture(settings.SIMULATED_PROCESSING_SECONDS)
