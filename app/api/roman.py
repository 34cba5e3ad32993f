from __future__ import annotations

import re

import structlog
from fastapi import APIRouter, HTTPException, Query

from app.models.schemas import RomanNumeralResponse
from app.observability.metrics import get_metrics
from app.observability.tracing import get_tracer
from app.roman.converter import MAX_VALUE, MIN_VALUE, to_roman

router = APIRouter(tags=["roman"])

OUT_OF_RANGE_DETAIL = f"Number must be between {MIN_VALUE} and {MAX_VALUE}"

_INTEGER = re.compile(r"\s*([+-]?)([0-9]+)\s*")


def _parse_number(query: str) -> int | None:
    """
    Parse a base-10 integer; None when the text is not one.

    Values with more significant digits than MAX_VALUE are cut to one digit
    more than MAX_VALUE has, which keeps them out of range without handing
    arbitrarily long strings to int().
    """
    match = _INTEGER.fullmatch(query)
    if not match:
        return None

    sign, digits = match.groups()
    significant = digits.lstrip("0") or "0"
    return int(sign + significant[: len(str(MAX_VALUE)) + 1])


@router.get("/romannumeral", response_model=RomanNumeralResponse)
async def roman_numeral(query: str | None = Query(default=None)) -> RomanNumeralResponse:
    logger = structlog.get_logger("roman")
    metrics = get_metrics()

    if not query:
        metrics.observe_conversion("missing_query")
        logger.warning("missing_query_parameter")
        raise HTTPException(status_code=400, detail="Query parameter is required")

    logger.info("conversion_requested", query=query)

    number = _parse_number(query)
    if number is None:
        metrics.observe_conversion("invalid_format")
        logger.warning("invalid_number_format", query=query)
        raise HTTPException(status_code=400, detail="Invalid number format")

    if number < MIN_VALUE or number > MAX_VALUE:
        metrics.observe_conversion("out_of_range")
        logger.warning("number_out_of_range", query=query, number=number)
        raise HTTPException(status_code=400, detail=OUT_OF_RANGE_DETAIL)

    with get_tracer().start_as_current_span("roman.convert") as span, metrics.time_conversion():
        span.set_attribute("roman.input", number)
        output = to_roman(number)
        span.set_attribute("roman.output", output)

    metrics.observe_conversion("success")
    logger.info("conversion_succeeded", input=number, output=output)
    return RomanNumeralResponse(input=query, output=output)
