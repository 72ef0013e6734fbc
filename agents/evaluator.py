"""Per-answer evaluation against the transcription, scoring and video collaborators.

Each of the three calls degrades independently to a fixed default when the
collaborator fails or returns something unparseable. Nothing is retried.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from config.registry import QUALITY_KEY, TRANSCRIBE_KEY, VIDEO_KEY

from .common import encode_artifact, invoke
from .types import (
    AnswerArtifact,
    AnswerEvaluation,
    QualityPayload,
    Question,
    TranscriptPayload,
    TranscriptResult,
    VideoAnalysis,
    VideoPayload,
)

logger = logging.getLogger(__name__)

TRANSCRIPT_UNAVAILABLE = "(Analysis unavailable due to error)"
DEFAULT_QUALITY_SCORE = 50
VIDEO_UNAVAILABLE_SUMMARY = "Video analysis unavailable due to error."
DEFAULT_VIDEO_CONFIDENCE = 50


class EvaluatorClient:
    async def transcribe(self, question: Question, artifact: AnswerArtifact) -> Optional[TranscriptResult]:
        """Return the transcript, or ``None`` when transcription failed."""

        try:
            raw = await invoke(TRANSCRIBE_KEY, question=question.text, **encode_artifact(artifact))
            payload = TranscriptPayload.model_validate(raw)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Transcription failed for question %d: %s", question.index, exc)
            return None
        return TranscriptResult(text=payload.transcript)

    async def evaluate_transcript(self, question: Question, transcript: str) -> Optional[int]:
        try:
            raw = await invoke(QUALITY_KEY, question=question.text, transcript=transcript)
            payload = QualityPayload.model_validate(raw)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Transcript scoring failed for question %d: %s", question.index, exc)
            return None
        return payload.quality_score

    async def analyze_video(self, question: Question, artifact: AnswerArtifact) -> Optional[VideoAnalysis]:
        try:
            raw = await invoke(VIDEO_KEY, question=question.text, **encode_artifact(artifact))
            payload = VideoPayload.model_validate(raw)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Video analysis failed for question %d: %s", question.index, exc)
            return None
        return VideoAnalysis(question=question.text, summary=payload.summary, confidence=payload.confidence)

    async def _transcript_chain(
        self, question: Question, artifact: AnswerArtifact
    ) -> Tuple[Optional[TranscriptResult], Optional[int]]:
        transcript = await self.transcribe(question, artifact)
        if transcript is None:
            # nothing to score
            return None, None
        return transcript, await self.evaluate_transcript(question, transcript.text)

    async def evaluate(self, question: Question, artifact: AnswerArtifact) -> AnswerEvaluation:
        """Transcribe+score and analyze video concurrently, then merge with defaults."""

        (transcript, quality), video = await asyncio.gather(
            self._transcript_chain(question, artifact),
            self.analyze_video(question, artifact),
        )
        degraded: List[str] = []
        if transcript is None:
            degraded.append("transcript")
            transcript = TranscriptResult(text=TRANSCRIPT_UNAVAILABLE)
        if quality is None:
            degraded.append("quality")
            quality = DEFAULT_QUALITY_SCORE
        if video is None:
            degraded.append("video")
            video = VideoAnalysis(
                question=question.text,
                summary=VIDEO_UNAVAILABLE_SUMMARY,
                confidence=DEFAULT_VIDEO_CONFIDENCE,
            )
        return AnswerEvaluation(
            question=question,
            transcript=transcript,
            quality_score=quality,
            video=video,
            degraded=degraded,
        )
