"""Capability probe: decide once whether live capture is possible."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from agents.types import CaptureMode

from .devices import DeviceUnavailableError, MediaDevices, MediaStream

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    mode: CaptureMode
    stream: Optional[MediaStream] = None
    reason: Optional[str] = None


async def probe_capture(devices: Optional[MediaDevices]) -> ProbeResult:
    """Try to acquire an audio+video stream.

    Device errors never propagate: any failure yields a simulated result.
    """

    try:
        if devices is None:
            raise DeviceUnavailableError("media devices API not supported")
        stream = await devices.get_user_media(audio=True, video=True)
        if stream is None:
            raise DeviceUnavailableError("no stream returned")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Camera access failed or not available: %s", exc)
        return ProbeResult(mode="simulated", reason=str(exc) or type(exc).__name__)
    return ProbeResult(mode="live", stream=stream)
