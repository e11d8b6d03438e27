"""HTTP API for GamerMatch."""

import uuid
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List, Optional

import sentry_sdk
from fastapi import Body, Depends, FastAPI, Header, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.redis import RedisIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sqlalchemy import text

from gamermatch import __version__
from gamermatch.config import settings
from gamermatch.engine import MatchEngine
from gamermatch.models.outcomes import Outcome
from gamermatch.services.admin_service import is_admin
from gamermatch.utils.database import Database, init_database
from gamermatch.utils.errors import ErrorCode
from gamermatch.utils.logging import bind_request_context, clear_request_context, configure_logging, get_logger

logger = get_logger(__name__)

# Initialize Sentry if DSN is provided
if settings.SENTRY_DSN:
    logger.info("Initializing Sentry...")
    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=1.0 if settings.ENVIRONMENT == "development" else 0.1,
            integrations=[
                FastApiIntegration(transaction_style="url"),
                SqlalchemyIntegration(),
                RedisIntegration(),
            ],
        )
        logger.info("Sentry initialized")
    except Exception as e:
        logger.error("Failed to initialize Sentry", error=str(e))

ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.DUPLICATE_SWIPE: 409,
    ErrorCode.ALREADY_BLOCKED: 409,
    ErrorCode.PROFILE_NOT_FOUND: 404,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.NOT_ELIGIBLE: 422,
    ErrorCode.PERSISTENCE_FAILURE: 503,
    ErrorCode.INVALID_FILTER: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.CONFIGURATION_ERROR: 500,
}


class SwipeRequest(BaseModel):
    swiped_id: str
    action: str


class BlockRequest(BaseModel):
    blocked_id: str


class ReportRequest(BaseModel):
    reported_id: str
    category: str
    description: Optional[str] = None


class ReportStatusRequest(BaseModel):
    status: str
    admin_notes: Optional[str] = None


@lru_cache
def get_match_engine() -> MatchEngine:
    return MatchEngine()


def respond(outcome: Outcome, success_status: int = 200) -> JSONResponse:
    """Serialize an outcome, using the error table for the status of failures."""
    status_code = success_status if outcome.ok else ERROR_STATUS.get(outcome.error, 500)  # type: ignore[arg-type]
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan."""
    configure_logging()
    logger.info("Starting GamerMatch API...")

    try:
        init_database()
    except Exception as e:
        error_details = {}
        if hasattr(e, "details"):
            error_details = e.details
        logger.error("Failed to initialize database", error=str(e), details=error_details)
        raise

    yield

    logger.info("Shutting down GamerMatch API...")
    Database.reset()


app = FastAPI(
    title=settings.APP_NAME,
    description="GamerMatch discovery, swipes and matches",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def request_context(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    bind_request_context(request_id=request.headers.get("X-Request-Id", str(uuid.uuid4())), path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_request_context()


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    try:
        with Database.get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
        database_ok = True
    except Exception as e:
        logger.error("Health check database probe failed", error=str(e))
        database_ok = False

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "ok" if database_ok else "error",
            "database": database_ok,
            "app": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
        },
    )


@app.get("/")
async def root() -> JSONResponse:
    """Root endpoint."""
    return JSONResponse(content={"message": "GamerMatch API is running", "docs_url": "/docs"})


# Profiles


@app.post("/profiles")
def create_profile(data: Dict[str, Any] = Body(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.create_profile(data), success_status=201)


@app.get("/profiles/{profile_id}")
def get_profile(profile_id: str, engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_profile(profile_id))


@app.patch("/profiles/{profile_id}")
def update_profile(
    profile_id: str,
    data: Dict[str, Any] = Body(...),
    x_user_id: str = Header(...),
    engine: MatchEngine = Depends(get_match_engine),
) -> JSONResponse:
    if x_user_id != profile_id:
        return respond(Outcome(ok=False, error=ErrorCode.UNAUTHORIZED, message="You can only edit your own profile"))
    return respond(engine.update_profile(profile_id, data))


# Discovery, swipes and matches


@app.get("/discovery")
def discover(
    x_user_id: str = Header(...),
    platforms: Optional[List[str]] = Query(None),
    genres: Optional[List[str]] = Query(None),
    playstyle: Optional[str] = None,
    voice_chat: Optional[bool] = Query(None, alias="voiceChat"),
    regions: Optional[List[str]] = Query(None),
    limit: Optional[int] = None,
    offset: int = 0,
    engine: MatchEngine = Depends(get_match_engine),
) -> JSONResponse:
    raw_filters = {
        "platforms": platforms,
        "genres": genres,
        "playstyle": playstyle,
        "voice_chat": voice_chat,
        "regions": regions,
    }
    filters = {key: value for key, value in raw_filters.items() if value is not None}
    return respond(engine.discover(x_user_id, filters or None, limit, offset))


@app.post("/swipes")
def record_swipe(
    request: SwipeRequest, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.record_swipe(x_user_id, request.swiped_id, request.action), success_status=201)


@app.get("/matches")
def get_matches(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_matches(x_user_id))


@app.delete("/matches/{match_id}")
def unmatch(match_id: str, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.unmatch(x_user_id, match_id))


# Blocking and reports


@app.post("/blocks")
def block_user(
    request: BlockRequest, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.block_user(x_user_id, request.blocked_id), success_status=201)


@app.delete("/blocks/{blocked_id}")
def unblock_user(
    blocked_id: str, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.unblock_user(x_user_id, blocked_id))


@app.get("/blocks")
def get_blocked_users(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_blocked_users(x_user_id))


@app.post("/reports")
def report_user(
    request: ReportRequest, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    outcome = engine.report_user(x_user_id, request.reported_id, request.category, request.description)
    return respond(outcome, success_status=201)


# Account lifecycle


@app.post("/account/deactivate")
def delete_account(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.delete_account(x_user_id))


@app.post("/account/deletion")
def request_account_deletion(
    x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.request_account_deletion(x_user_id), success_status=201)


@app.delete("/account/deletion")
def cancel_account_deletion(
    x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.cancel_account_deletion(x_user_id))


@app.get("/account/deletion")
def get_deletion_status(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_deletion_status(x_user_id))


@app.get("/account/export")
def export_user_data(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.export_user_data(x_user_id))


# Admin


@app.get("/admin/reports")
def get_pending_reports(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_pending_reports(x_user_id))


@app.patch("/admin/reports/{report_id}")
def update_report_status(
    report_id: str,
    request: ReportStatusRequest,
    x_user_id: str = Header(...),
    engine: MatchEngine = Depends(get_match_engine),
) -> JSONResponse:
    return respond(engine.update_report_status(x_user_id, report_id, request.status, request.admin_notes))


@app.post("/admin/users/{user_id}/ban")
def ban_user(user_id: str, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.ban_user(x_user_id, user_id))


@app.post("/admin/users/{user_id}/unban")
def unban_user(
    user_id: str, x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)
) -> JSONResponse:
    return respond(engine.unban_user(x_user_id, user_id))


@app.get("/admin/stats")
def get_admin_stats(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    return respond(engine.get_admin_stats(x_user_id))


@app.post("/admin/reconcile-matches")
def reconcile_matches(x_user_id: str = Header(...), engine: MatchEngine = Depends(get_match_engine)) -> JSONResponse:
    if not is_admin(x_user_id):
        return respond(Outcome(ok=False, error=ErrorCode.UNAUTHORIZED, message="Admin privileges required"))
    return respond(engine.reconcile_matches())
