"""
DischargeFlow - Discharge/Death Summary Drafting API
Patient intake, clinical data capture, AI-drafted summaries and human review.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import WorkflowError
from .core.logging_config import configure_logging
from .core.request_logging import RequestLoggingMiddleware
from .models.base import Base, engine
from .models import patient, clinical, summary  # noqa: F401 - register tables
from .api import patients

configure_logging()
logger = logging.getLogger(__name__)

# NOTE: In production, use Alembic migrations instead of create_all()
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="DischargeFlow API",
    description=(
        "Captures patient demographics and clinical findings, drafts discharge/death "
        "summaries through an external text-generation service, and records the "
        "human-reviewed final text."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(patients.router, prefix=settings.API_PREFIX)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    violations = [
        {"field": str(err["loc"][-1]) if err.get("loc") else "body", "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.warning("Malformed request to %s: %s", request.url.path, violations)
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "kind": "validation_error",
                "message": "Request validation failed",
                "violations": violations,
            }
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"kind": "internal_error", "message": "Internal server error"}},
    )


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
