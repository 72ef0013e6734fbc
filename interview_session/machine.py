"""Interview session state machine.

Drives the capability probe once, then for every question runs
capture -> evaluation in order, and hands the accumulated results to the
completion handler exactly once. Cancellation is observed at whichever
suspension point is active and always releases the media stream.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from agents.evaluator import EvaluatorClient
from agents.question_generator import generate_questions
from agents.types import (
    AnswerArtifact,
    AnswerEvaluation,
    CaptureMode,
    JobContext,
    QAPair,
    Question,
    SessionResults,
    VideoAnalysis,
)
from capture import (
    CaptureStrategy,
    MediaDevices,
    ProbeResult,
    RecorderFactory,
    RecorderUnavailableError,
    SimulatedCapture,
    probe_capture,
    release_stream,
    select_strategy,
)
from config.settings import Settings, settings as default_settings
from observability import log_event, span
from services.timer import SessionTimer

from .errors import HandoffError, StateTransitionError

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[SessionResults], Union[Any, Awaitable[Any]]]


class SessionState(str, Enum):
    INTRO = "intro"
    LOADING_QUESTIONS = "loading_questions"
    QUESTION = "question"
    RECORDING = "recording"
    EVALUATING = "evaluating"
    FINISHED = "finished"
    CANCELLED = "cancelled"


VALID_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.INTRO: frozenset({SessionState.LOADING_QUESTIONS, SessionState.CANCELLED}),
    SessionState.LOADING_QUESTIONS: frozenset({SessionState.QUESTION, SessionState.CANCELLED}),
    SessionState.QUESTION: frozenset({SessionState.RECORDING, SessionState.CANCELLED}),
    SessionState.RECORDING: frozenset({SessionState.EVALUATING, SessionState.CANCELLED}),
    SessionState.EVALUATING: frozenset({SessionState.QUESTION, SessionState.FINISHED, SessionState.CANCELLED}),
    SessionState.FINISHED: frozenset(),
    SessionState.CANCELLED: frozenset(),
}


class InterviewSession:
    def __init__(
        self,
        job: JobContext,
        *,
        on_complete: CompletionHandler,
        devices: Optional[MediaDevices] = None,
        recorder_factory: Optional[RecorderFactory] = None,
        evaluator: Optional[EvaluatorClient] = None,
        settings: Settings = default_settings,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.job = job
        self.events: List[Dict[str, Any]] = []
        self.questions_fallback = False

        self._on_complete = on_complete
        self._devices = devices
        self._recorder_factory = recorder_factory
        self._evaluator = evaluator or EvaluatorClient()
        self._settings = settings

        self._state = SessionState.INTRO
        self._probe: Optional[ProbeResult] = None
        self._probing: Optional[asyncio.Future] = None
        self._capture: Optional[CaptureStrategy] = None
        self._timer: Optional[SessionTimer] = None
        self._inflight: Optional[asyncio.Future] = None
        self._questions: List[Question] = []
        self._index = 0
        self._transcripts: List[QAPair] = []
        self._video_analyses: List[VideoAnalysis] = []
        self._artifacts: List[AnswerArtifact] = []

        self._done: Optional[asyncio.Future] = None
        self._settled = False
        self._outcome: Any = None
        self._error: Optional[BaseException] = None
        self._settled_callbacks: List[Callable[["InterviewSession"], None]] = []

        log_event("session_opened", self.session_id, job_id=job.job_id)

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def capture_mode(self) -> Optional[CaptureMode]:
        return self._capture.mode if self._capture is not None else None

    @property
    def questions(self) -> Tuple[Question, ...]:
        return tuple(self._questions)

    @property
    def question_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Optional[Question]:
        if self._state in (SessionState.QUESTION, SessionState.RECORDING, SessionState.EVALUATING):
            return self._questions[self._index]
        return None

    @property
    def answered(self) -> int:
        return len(self._transcripts)

    def time_left(self) -> float:
        if self._timer is None or self._state is not SessionState.RECORDING:
            return 0.0
        return self._timer.time_left()

    # ------------------------------------------------------------------
    # Transitions

    async def prepare(self) -> ProbeResult:
        """Probe capture devices once and pick the strategy for the whole session."""

        if self._probe is not None:
            return self._probe
        if self._probing is None:
            self._check(SessionState.LOADING_QUESTIONS)
            self._probing = asyncio.ensure_future(self._run_probe())
        # concurrent callers share the one in-flight probe
        return await asyncio.shield(self._probing)

    async def _run_probe(self) -> ProbeResult:
        try:
            probe = await self._suspend(
                probe_capture(self._devices),
                on_discard=lambda result: release_stream(result.stream),
            )
        except asyncio.CancelledError:
            if self._state is SessionState.CANCELLED:
                return ProbeResult(mode="simulated", reason="cancelled")
            raise
        self._probe = probe
        self._release_capture()
        self._capture = select_strategy(probe, self._recorder_factory, settings=self._settings)
        log_event(
            "capture_probe",
            self.session_id,
            capture_mode=self._capture.mode,
            reason=probe.reason,
        )
        return probe

    async def start(self) -> None:
        """Leave the intro screen and load the question set."""

        self._check(SessionState.LOADING_QUESTIONS)
        if self._probe is None:
            await self.prepare()
            if self._state is SessionState.CANCELLED:
                return
        self._transition(SessionState.LOADING_QUESTIONS)
        try:
            with span(self, "load_questions"):
                question_set = await self._suspend(generate_questions(self.job))
        except asyncio.CancelledError:
            if self._state is SessionState.CANCELLED:
                return
            raise
        self._questions = list(question_set.questions)
        self.questions_fallback = question_set.fallback
        log_event(
            "questions_loaded",
            self.session_id,
            count=len(self._questions),
            fallback=question_set.fallback,
        )
        self._transition(SessionState.QUESTION)

    async def start_answer(self) -> None:
        """Arm a fresh per-question timer and start capture."""

        self._transition(SessionState.RECORDING)
        self._timer = SessionTimer(self._on_timer_expired)
        self._timer.arm(self._settings.QUESTION_SECONDS)
        try:
            await self._start_capture(self._index)
        except asyncio.CancelledError:
            if self._state is SessionState.CANCELLED:
                return
            raise
        except Exception as exc:
            self._abort(exc)
            raise

    async def finish_answer(self, trigger: str = "manual") -> None:
        """Stop capture, evaluate the answer and advance (or finish)."""

        self._transition(SessionState.EVALUATING, trigger=trigger)
        if self._timer is not None:
            self._timer.cancel()
        question = self._questions[self._index]
        try:
            artifact = await self._stop_capture(question.index)
            with span(self, f"evaluate_q{question.index}"):
                evaluation = await self._suspend(self._evaluator.evaluate(question, artifact))
        except asyncio.CancelledError:
            if self._state is SessionState.CANCELLED:
                return
            raise
        except Exception as exc:
            self._abort(exc)
            raise

        self._append(evaluation, artifact)
        if self._index + 1 < len(self._questions):
            self._index += 1
            self._transition(SessionState.QUESTION)
            return
        await self._finish()

    def cancel(self) -> bool:
        """Cancel from any non-finished state. Returns ``False`` if already cancelled."""

        if self._state is SessionState.CANCELLED:
            return False
        self._transition(SessionState.CANCELLED)
        self._teardown()
        self._settle(None)
        log_event("session_cancelled", self.session_id, outcome="cancelled")
        return True

    async def wait(self) -> Any:
        """Resolve with the completion handler's return value.

        Cancelled sessions resolve with ``None``; a failed handoff raises
        ``HandoffError``.
        """

        if self._done is None:
            self._done = asyncio.get_running_loop().create_future()
            if self._settled:
                self._apply(self._done)
        return await asyncio.shield(self._done)

    def add_done_callback(self, callback: Callable[["InterviewSession"], None]) -> None:
        """Run ``callback(session)`` once the session finishes or is cancelled."""

        if self._settled:
            callback(self)
            return
        self._settled_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Internals

    def _check(self, target: SessionState) -> None:
        if target not in VALID_TRANSITIONS[self._state]:
            raise StateTransitionError(self._state.value, target.value)

    def _transition(self, target: SessionState, **fields: Any) -> None:
        self._check(target)
        self._state = target
        log_event("state", self.session_id, state=target.value, question_index=self._index, **fields)

    async def _suspend(self, awaitable: Awaitable[Any], on_discard: Optional[Callable[[Any], None]] = None) -> Any:
        task = asyncio.ensure_future(awaitable)
        self._inflight = task
        try:
            result = await task
        finally:
            if self._inflight is task:
                self._inflight = None
        if self._state is SessionState.CANCELLED:
            if on_discard is not None:
                on_discard(result)
            raise asyncio.CancelledError()
        return result

    def _escalate(self, exc: Exception) -> None:
        """Switch to simulated capture for the rest of the session."""

        previous = self._capture
        if previous is not None:
            previous.release()
        self._capture = SimulatedCapture(self._settings.SIMULATED_PROCESSING_SECONDS)
        log_event(
            "capture_fallback",
            self.session_id,
            level=logging.WARNING,
            question_index=self._index,
            capture_mode=self._capture.mode,
            reason=str(exc),
        )

    async def _start_capture(self, index: int) -> None:
        capture = self._active_capture()
        try:
            await self._suspend(capture.start_recording(index))
        except RecorderUnavailableError as exc:
            self._escalate(exc)
            await self._active_capture().start_recording(index)

    async def _stop_capture(self, index: int) -> AnswerArtifact:
        capture = self._active_capture()
        try:
            return await self._suspend(capture.stop_recording())
        except RecorderUnavailableError as exc:
            self._escalate(exc)
            fallback = self._active_capture()
            await fallback.start_recording(index)
            return await self._suspend(fallback.stop_recording())

    def _active_capture(self) -> CaptureStrategy:
        if self._capture is None:
            self._capture = SimulatedCapture(self._settings.SIMULATED_PROCESSING_SECONDS)
        return self._capture

    def _append(self, evaluation: AnswerEvaluation, artifact: AnswerArtifact) -> None:
        self._transcripts.append(
            QAPair(
                question=evaluation.question.text,
                answer=evaluation.transcript.text,
                score=evaluation.quality_score,
            )
        )
        self._video_analyses.append(evaluation.video)
        self._artifacts.append(artifact)
        log_event(
            "answer_evaluated",
            self.session_id,
            question_index=evaluation.question.index,
            capture_mode=self.capture_mode,
            degraded=list(evaluation.degraded),
        )

    async def _finish(self) -> None:
        self._transition(SessionState.FINISHED)
        self._release_capture()
        results = SessionResults(
            transcripts=list(self._transcripts),
            video_analyses=list(self._video_analyses),
            artifacts=list(self._artifacts),
        )
        log_event("session_finished", self.session_id, answered=len(results), capture_mode=self.capture_mode)
        try:
            outcome = self._on_complete(results)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as exc:
            error = HandoffError(self.session_id, f"completion handler failed: {exc}")
            error.__cause__ = exc
            self._settle(None, error)
            raise error
        self._settle(outcome)

    async def _on_timer_expired(self) -> None:
        log_event("timer_expired", self.session_id, question_index=self._index, trigger="timer")
        try:
            await self.finish_answer(trigger="timer")
        except StateTransitionError as exc:
            logger.debug("Timer fired after answer was finished: %s", exc)
        except Exception as exc:  # noqa: BLE001
            # surfaced to callers through wait()
            logger.error("Timer-driven completion failed for session %s: %s", self.session_id, exc)

    def _abort(self, exc: BaseException) -> None:
        if self._state in (SessionState.FINISHED, SessionState.CANCELLED):
            return
        self._transition(SessionState.CANCELLED)
        self._teardown()
        self._settle(None, exc)
        log_event("session_cancelled", self.session_id, level=logging.ERROR, outcome="error", reason=str(exc))

    def _teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        inflight, self._inflight = self._inflight, None
        if inflight is not None and not inflight.done():
            inflight.cancel()
        self._transcripts.clear()
        self._video_analyses.clear()
        self._artifacts.clear()
        self._release_capture()

    def _release_capture(self) -> None:
        if self._capture is not None:
            self._capture.release()

    def _settle(self, outcome: Any, error: Optional[BaseException] = None) -> None:
        if self._settled:
            return
        self._settled = True
        self._outcome = outcome
        self._error = error
        if self._done is not None and not self._done.done():
            self._apply(self._done)
        callbacks, self._settled_callbacks = self._settled_callbacks, []
        for callback in callbacks:
            callback(self)

    def _apply(self, future: asyncio.Future) -> None:
        if self._error is not None:
            future.set_exception(self._error)
        else:
            future.set_result(self._outcome)


__all__ = ["CompletionHandler", "InterviewSession", "SessionState", "VALID_TRANSITIONS"]
