"""Lightweight CLI helpers for inspecting and rescoring applications."""
from __future__ import annotations

import argparse
import asyncio
import uuid
from pathlib import Path

from config.settings import settings


def list_job(job_id: str) -> None:
    from storage.applications import list_applications

    for app in list_applications(job_id):
        print(
            f"[{app.created_at}] {app.id} {app.applicant_name} match={app.match_score} "
            f"transcript={app.transcript_match_score} video={app.video_match_score} level={app.execution_level}"
        )


def recalculate(job_id: str, transcript: int, video: int) -> None:
    from agents.types import ScoringWeights
    from services.scoring import recalculate_job_scores

    updated = recalculate_job_scores(job_id, ScoringWeights(transcript=transcript, video=video))
    print(f"updated {updated} application(s) for job {job_id}")


def simulate(job_id: str, title: str, requirements: str) -> None:
    from agents.types import Applicant
    from agents.wiring import bind_from_file
    from services.sessions import job_context, run_simulated_interview

    bind_from_file(Path(settings.APP_CONFIG_PATH))
    job = job_context(job_id, title, requirements)
    applicant = Applicant(applicant_id=f"sim-{uuid.uuid4().hex[:8]}", name="Simulated Applicant")
    app = asyncio.run(run_simulated_interview(job, applicant))
    if app is None:
        print("session did not complete")
        return
    print(f"stored {app.id} match={app.match_score} level={app.execution_level}")


def main() -> None:
    from storage.migrate import migrate

    parser = argparse.ArgumentParser()
    parser.add_argument("--list", metavar="JOB_ID", help="Show applications for a job, newest first")
    parser.add_argument("--recalculate", metavar="JOB_ID", help="Rescore every application under a job")
    parser.add_argument("--transcript", type=int, default=settings.DEFAULT_TRANSCRIPT_WEIGHT)
    parser.add_argument("--video", type=int, default=settings.DEFAULT_VIDEO_WEIGHT)
    parser.add_argument("--simulate", metavar="JOB_ID", help="Run a full interview in simulated capture mode")
    parser.add_argument("--title", default="Software Engineer")
    parser.add_argument("--requirements", default="")
    args = parser.parse_args()

    migrate(settings.DB_PATH)
    if args.simulate:
        simulate(args.simulate, args.title, args.requirements)
    if args.recalculate:
        recalculate(args.recalculate, args.transcript, args.video)
    if args.list:
        list_job(args.list)


if __name__ == "__main__":
    main()
