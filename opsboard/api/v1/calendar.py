"""
Execution calendar API endpoints
"""
from typing import Any, Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from opsboard.application.execution_calendar import build_month_view


router = APIRouter(prefix="/api/v1/calendar", tags=["calendar"])


# === Request/Response models ===

class ExecutionLogEntry(BaseModel):
    start_time: str
    status: str | None = None
    triggered_by: str | None = None
    job_name: str | None = None


class MonthRequest(BaseModel):
    year: int = Field(ge=1, le=9999)
    month_index: int = Field(ge=0, le=11)  # 0 = January
    logs: list[ExecutionLogEntry] = []
    direction: Literal["prev", "next"] | None = None


class MonthResponse(BaseModel):
    year: int
    month_index: int
    label: str
    weekdays: list[str]
    cells: list[dict[str, Any]]


# === Endpoints ===

@router.post("/month", response_model=MonthResponse)
def month_view(req: MonthRequest):
    """42-cell month grid with execution events overlaid"""
    return build_month_view(
        year=req.year,
        month_index=req.month_index,
        log=[entry.model_dump() for entry in req.logs],
        direction=req.direction,
    )
