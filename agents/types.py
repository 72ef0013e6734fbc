"""Shared type definitions for the interview pipeline."""
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, computed_field, model_validator

ExecutionLevel = Literal["high", "medium", "low"]
CaptureMode = Literal["live", "simulated"]
Tone = Literal["Professional", "Friendly", "Neutral", "Energetic", "Calm"]
ApplicationStatus = Literal["pending", "completed", "reviewed"]


class Question(BaseModel):
    index: int = Field(ge=0)
    text: str

    model_config = {"frozen": True}


class AnswerArtifact(BaseModel):
    question_index: int = Field(ge=0)
    content: bytes
    content_type: str
    simulated: bool = False

    model_config = {"frozen": True}


class TranscriptResult(BaseModel):
    text: str


class VideoAnalysis(BaseModel):
    question: str
    summary: str
    confidence: int = Field(ge=1, le=100)


class AnswerEvaluation(BaseModel):
    """Evaluator output for a single answer."""

    question: Question
    transcript: TranscriptResult
    quality_score: int = Field(ge=1, le=100)
    video: VideoAnalysis
    degraded: List[Literal["transcript", "quality", "video"]] = Field(default_factory=list)


class QAPair(BaseModel):
    question: str
    answer: str
    score: int = Field(ge=1, le=100)


class ScoringWeights(BaseModel):
    transcript: int = Field(ge=0, le=100)
    video: int = Field(ge=0, le=100)


class JobContext(BaseModel):
    job_id: str
    title: str
    requirements: str = ""
    tone: Tone = "Professional"
    priority_questions: List[str] = Field(default_factory=list)


class Applicant(BaseModel):
    applicant_id: str
    name: str
    is_demo: bool = False


class SessionResults(BaseModel):
    """Accumulated per-question output handed off when a session finishes."""

    transcripts: List[QAPair]
    video_analyses: List[VideoAnalysis]
    artifacts: List[AnswerArtifact]

    @model_validator(mode="after")
    def _aligned(self) -> "SessionResults":
        if not (len(self.transcripts) == len(self.video_analyses) == len(self.artifacts)):
            raise ValueError("session result arrays must have equal length")
        return self

    def __len__(self) -> int:
        return len(self.transcripts)


class CandidateProfile(BaseModel):
    summary: str
    skills: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    suggested_role: str
    transcript_match_score: int = Field(ge=0, le=100)
    formatted_resume: str


def level_for(score: int) -> ExecutionLevel:
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


class Application(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    applicant_name: str
    status: ApplicationStatus = "completed"
    match_score: int
    transcript_match_score: Optional[int] = None
    video_match_score: Optional[int] = None
    scoring_weights: Optional[ScoringWeights] = None
    transcripts: List[QAPair] = Field(default_factory=list)
    video_analyses: List[VideoAnalysis] = Field(default_factory=list)
    ai_resume: Optional[CandidateProfile] = None
    created_at: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def execution_level(self) -> ExecutionLevel:
        return level_for(self.match_score)


# Collaborator payloads. Field names follow the remote JSON; aliases cover
# the variants the remote services are known to emit.


class QuestionsPayload(BaseModel):
    questions: List[str]


class TranscriptPayload(BaseModel):
    transcript: str = Field(min_length=1)


class QualityPayload(BaseModel):
    quality_score: int = Field(
        ge=1,
        le=100,
        validation_alias=AliasChoices("qualityScore", "quality_score", "quality", "score"),
    )


class VideoPayload(BaseModel):
    summary: str = Field(min_length=1)
    confidence: int = Field(ge=1, le=100)


class ProfilePayload(BaseModel):
    summary: str
    skills: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    suggested_role: str = Field(validation_alias=AliasChoices("suggestedRole", "suggested_role"))
    transcript_match_score: int = Field(
        ge=0,
        le=100,
        validation_alias=AliasChoices("transcriptMatchScore", "transcript_match_score", "finalMatchScore"),
    )
    formatted_resume: str = Field(validation_alias=AliasChoices("formattedResume", "formatted_resume"))
