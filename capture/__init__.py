"""Media capture: capability probe plus live and simulated strategies."""
from .devices import (
    CaptureError,
    DeviceUnavailableError,
    MediaDevices,
    MediaStream,
    Recorder,
    RecorderFactory,
    RecorderUnavailableError,
    release_stream,
)
from .probe import ProbeResult, probe_capture
from .strategies import (
    SIMULATED_CONTENT,
    SIMULATED_CONTENT_TYPE,
    CaptureStrategy,
    LiveCapture,
    SimulatedCapture,
    select_strategy,
)

__all__ = [
    "CaptureError",
    "DeviceUnavailableError",
    "MediaDevices",
    "MediaStream",
    "Recorder",
    "RecorderFactory",
    "RecorderUnavailableError",
    "release_stream",
    "ProbeResult",
    "probe_capture",
    "SIMULATED_CONTENT",
    "SIMULATED_CONTENT_TYPE",
    "CaptureStrategy",
    "LiveCapture",
    "SimulatedCapture",
    "select_strategy",
]
