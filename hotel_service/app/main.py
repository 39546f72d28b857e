import logging
import uvicorn
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotel_service.app.backend.routers import hotels_router, availability_router, booking_router, admin_router
from hotel_service.app.backend.models import Hotel, Room, Booking, BookingNight  # noqa: F401 (table registration)
from hotel_service.app.backend.services import seed_service
from hotel_service.app.backend.services.booking_service import StorageError
from common.config.logging_config import configure_logging
from common.config.settings import get_settings
from common.db.database import Base, engine, SessionLocal
from common.pydantic.problem import ApiProblem, ProblemDetails
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)
    logger.info("hotel_service started (env=%s)", settings.app_env)

    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            seed_service.seed_database(db)
        finally:
            db.close()

    yield

app = FastAPI(
    title="Hotel Booking API",
    description="Hotel search, room availability and single-room bookings.",
    lifespan=lifespan
)

def problem_response(problem: ProblemDetails, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, ApiProblem):
        return problem_response(exc.to_problem(), headers=exc.headers)

    problem = ProblemDetails(
        title=HTTPStatus(exc.status_code).phrase,
        status=exc.status_code,
        detail=exc.detail if isinstance(exc.detail, str) else None
    )
    return problem_response(problem, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in ("query", "path", "header"):
            field = location[-1]
        else:
            field = ".".join(location[1:]) or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value."))

    problem = ProblemDetails(
        title="Invalid request",
        status=status.HTTP_400_BAD_REQUEST,
        code="validation",
        errors=errors
    )
    return problem_response(problem)

@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    problem = ProblemDetails(
        title="Unexpected error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc)
    )
    return problem_response(problem)

@app.get("/health", tags=["health"])
async def health():
    return {"status": "Healthy"}

app.include_router(hotels_router.router)
app.include_router(availability_router.router)
app.include_router(booking_router.router)
app.include_router(admin_router.router)

def run():
    """Console entry point: serves the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
