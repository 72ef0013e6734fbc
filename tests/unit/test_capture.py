import pytest

from capture import (
    SIMULATED_CONTENT,
    DeviceUnavailableError,
    LiveCapture,
    RecorderUnavailableError,
    SimulatedCapture,
    probe_capture,
    select_strategy,
)
from config.settings import settings
from tests.fakes import FakeDevices, FakeRecorderFactory, FakeStream


@pytest.mark.asyncio
async def test_probe_live_when_stream_acquired():
    devices = FakeDevices()
    probe = await probe_capture(devices)
    assert probe.mode == "live"
    assert probe.stream is devices.stream


@pytest.mark.asyncio
@pytest.mark.parametrize("devices", [None, FakeDevices(error=PermissionError("denied")), FakeDevices(error=DeviceUnavailableError("no camera"))])
async def test_probe_failures_are_simulated(devices):
    probe = await probe_capture(devices)
    assert probe.mode == "simulated"
    assert probe.stream is None
    assert probe.reason


@pytest.mark.asyncio
async def test_live_capture_negotiates_vp8_and_joins_chunks():
    factory = FakeRecorderFactory()
    capture = LiveCapture(FakeStream(), factory)
    await capture.start_recording(2)
    assert capture.is_recording
    artifact = await capture.stop_recording()
    assert artifact.question_index == 2
    assert artifact.content == b"frame-1frame-2"
    assert artifact.content_type == "video/webm;codecs=vp8"
    assert not artifact.simulated
    assert factory.created[0]["video_bits_per_second"] == 450_000
    assert factory.created[0]["audio_bits_per_second"] == 64_000


@pytest.mark.asyncio
async def test_live_capture_falls_back_to_plain_webm():
    capture = LiveCapture(FakeStream(), FakeRecorderFactory(supported=("video/webm",)))
    await capture.start_recording(0)
    artifact = await capture.stop_recording()
    assert artifact.content_type == "video/webm"


@pytest.mark.asyncio
async def test_recorder_construction_failure_raises():
    capture = LiveCapture(FakeStream(), FakeRecorderFactory(fail_create=True))
    with pytest.raises(RecorderUnavailableError):
        await capture.start_recording(0)
    assert not capture.is_recording


@pytest.mark.asyncio
async def test_recorder_finalize_failure_raises():
    capture = LiveCapture(FakeStream(), FakeRecorderFactory(fail_stop=True))
    await capture.start_recording(0)
    with pytest.raises(RecorderUnavailableError):
        await capture.stop_recording()


def test_release_stops_stream_once():
    stream = FakeStream()
    capture = LiveCapture(stream, FakeRecorderFactory())
    capture.release()
    capture.release()
    assert stream.stop_calls == 1


@pytest.mark.asyncio
async def test_simulated_capture_produces_placeholder():
    capture = SimulatedCapture(0)
    await capture.start_recording(1)
    artifact = await capture.stop_recording()
    assert artifact.content == SIMULATED_CONTENT == b"Simulation Data"
    assert artifact.content_type == "text/plain"
    assert artifact.simulated
    assert artifact.question_index == 1


@pytest.mark.asyncio
async def test_select_strategy():
    live = select_strategy(await probe_capture(FakeDevices()), FakeRecorderFactory())
    assert live.mode == "live"

    stream = FakeStream()
    no_recorder = select_strategy(await probe_capture(FakeDevices(stream=stream)), None)
    assert no_recorder.mode == "simulated"
    assert stream.stopped

    simulated = select_strategy(await probe_capture(None), FakeRecorderFactory(), settings=settings)
    assert simulated.mode == "simulated"
