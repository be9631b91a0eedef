"""HTTP boundary: accepts a batch, runs one job, returns its summary.

Routes:
  POST /api/process-candidates  body: JobRequest, response: JobResult
  GET  /health
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import Settings
from src.core.errors import PackagingError, ValidationError
from src.core.schemas import JobRequest
from src.pipeline.orchestrator import new_job_id, run_job
from src.pipeline.toolkit import Toolkit

logger = logging.getLogger(__name__)


def jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    """Keep only the JSON-safe parts of pydantic error entries."""
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": err.get("type", "")}
        for err in errors
    ]


async def _invalid_payload_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request: %d validation errors", len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "details": jsonable_errors(exc.errors())},
    )


def create_app(settings: Settings | None = None, toolkit: Toolkit | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Pipeline settings; defaults when None.
        toolkit: Capabilities used per candidate; built from settings when None.
    """
    settings = settings or Settings.default()
    toolkit = toolkit or Toolkit.from_settings(settings)

    app = FastAPI(title="Candidate Factsheets API", version="0.1.0")
    app.state.settings = settings
    app.state.toolkit = toolkit
    app.add_exception_handler(RequestValidationError, _invalid_payload_handler)  # type: ignore[arg-type]

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/process-candidates")
    async def process_candidates(body: JobRequest) -> JSONResponse:
        job_id = new_job_id()
        try:
            result = await run_job(
                job_id, body.candidates, app.state.settings, app.state.toolkit, body.labels(),
            )
        except ValidationError as e:
            logger.info("Rejected job request: %s", e)
            return JSONResponse(status_code=400, content={"error": str(e)})
        except PackagingError as e:
            logger.error("Error creating zip file for job %s: %s", job_id, e)
            return JSONResponse(status_code=500, content={"error": "Failed to zip files"})
        return JSONResponse(status_code=200, content=result.to_response())

    return app
