"""FastAPI routes for applications, answer videos and job AI settings."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Response

from agents.types import Application, ScoringWeights
from api.schemas import AISettingsReq, AISettingsResp, ApplicationList, HealthResp, RecalculateResp
from services.scoring import recalculate_job_scores
from storage.applications import get_application, list_applications
from storage.artifacts import ArtifactStore
from storage.job_settings import JobAISettings, JobAISettingsUpdate, get_job_settings, save_job_settings


router = APIRouter(prefix="/api")


def _is_demo(flag: Optional[str]) -> bool:
    return (flag or "").strip().lower() == "true"


@router.get("/health", response_model=HealthResp)
def health() -> HealthResp:
    return HealthResp()


@router.get("/jobs/{job_id}/applications", response_model=ApplicationList)
def job_applications(job_id: str) -> ApplicationList:
    return ApplicationList(job_id=job_id, applications=list_applications(job_id))


@router.get("/applications/{application_id}", response_model=Application)
def application_detail(application_id: str) -> Application:
    application = get_application(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.get("/applications/{application_id}/videos/{question_index}")
def application_video(application_id: str, question_index: int) -> Response:
    artifact = ArtifactStore().get(application_id, question_index)
    if artifact is None:
        raise HTTPException(status_code=404, detail="Video not found")
    return Response(content=artifact.content, media_type=artifact.content_type)


@router.get("/jobs/{job_id}/ai-settings", response_model=JobAISettings)
def read_ai_settings(job_id: str) -> JobAISettings:
    return get_job_settings(job_id)


@router.put("/jobs/{job_id}/ai-settings", response_model=AISettingsResp)
def write_ai_settings(
    job_id: str,
    req: AISettingsReq,
    x_demo_account: Optional[str] = Header(default=None),
) -> AISettingsResp:
    current = get_job_settings(job_id)
    update = JobAISettingsUpdate(**req.model_dump())
    if _is_demo(x_demo_account):
        preview = current.model_copy(
            update={
                "tone": update.tone,
                "priority_questions": list(update.priority_questions),
                "auto_follow_up": update.auto_follow_up,
                "scoring_weights": update.scoring_weights or current.scoring_weights,
                "updated_at": dt.datetime.now(dt.timezone.utc).isoformat(),
            }
        )
        return AISettingsResp(settings=preview, preview=True)

    saved = save_job_settings(job_id, update)
    recalculated = None
    if saved.scoring_weights != current.scoring_weights:
        recalculated = recalculate_job_scores(job_id, saved.scoring_weights)
    return AISettingsResp(settings=saved, recalculated=recalculated)


@router.post("/jobs/{job_id}/recalculate-scores", response_model=RecalculateResp)
def recalculate_scores(
    job_id: str,
    weights: ScoringWeights,
    x_demo_account: Optional[str] = Header(default=None),
) -> RecalculateResp:
    if _is_demo(x_demo_account):
        return RecalculateResp(updated_count=len(list_applications(job_id)), preview=True)
    return RecalculateResp(updated_count=recalculate_job_scores(job_id, weights))
