from datetime import datetime, timezone
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from app.api.metrics import router as metrics_router
from app.api.roman import OUT_OF_RANGE_DETAIL
from app.api.roman import router as roman_router
from app.config import get_settings
from app.models.schemas import HealthResponse
from app.observability.logging import configure_logging
from app.observability.middleware import RequestContextMiddleware
from app.observability.tracing import shutdown_tracing, start_tracing
from app.roman.converter import OutOfRangeError


app = FastAPI(title="Roman Numeral Service", version="1.0.0")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
app.include_router(roman_router)
app.include_router(metrics_router)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    configure_logging(
        level=settings.log_level_value,
        log_dir=settings.log_path if settings.log_to_file else None,
        backup_count=settings.log_backup_count,
    )
    if settings.otel_enabled:
        start_tracing(settings)

    structlog.get_logger("app").info(
        "service_started",
        environment=settings.app_env,
        host=settings.host,
        port=settings.port,
    )


@app.on_event("shutdown")
def _shutdown() -> None:
    shutdown_tracing()
    structlog.get_logger("app").info("service_stopped")


@app.exception_handler(OutOfRangeError)
async def out_of_range_handler(request: Request, exc: OutOfRangeError) -> JSONResponse:
    structlog.get_logger("app").warning("number_out_of_range", value=exc.value)
    return JSONResponse(status_code=400, content={"detail": OUT_OF_RANGE_DETAIL})


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html", {"title": "Roman Numeral Converter"})


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        environment=get_settings().app_env,
        timestamp=datetime.now(timezone.utc),
    )
