from __future__ import annotations  # FastAPI server exposing interview applications and scoring

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agents.wiring import bind_from_file
from api.routes import router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # Prepare storage and collaborator routes
    migrate(settings.DB_PATH)
    config_path = Path(settings.APP_CONFIG_PATH)
    if config_path.exists():
        bind_from_file(config_path)
    else:
        logger.warning("Collaborator config %s not found; collaborators left unbound", config_path)
    yield


app = FastAPI(title="Interview Scoring API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(router)


def main() -> None:  # Run the development server
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
