from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from app.config import get_settings
from app.observability.metrics import format_metrics_summary, get_metrics


router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
async def metrics(format: str = Query(default="prometheus")) -> Response:
    settings = get_settings()
    if not settings.enable_metrics_endpoint:
        raise HTTPException(status_code=404, detail="Not found")

    exposition = get_metrics().exposition()
    if format == "pretty":
        return PlainTextResponse(format_metrics_summary(exposition.decode("utf-8")))
    return Response(content=exposition, media_type=CONTENT_TYPE_LATEST)
