from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RomanNumeralResponse(BaseModel):
    input: str
    output: str


class HealthResponse(BaseModel):
    status: str
    environment: str
    timestamp: datetime
