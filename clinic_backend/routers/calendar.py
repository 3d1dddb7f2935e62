"""Calendar month view endpoints."""

from __future__ import annotations

from datetime import date as Date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, ConfigDict

from calendar_service.month_view import MonthView, build_month_view
from clinic_backend.dependencies import get_record_manager
from clinic_backend.models.appointment import Appointment
from clinic_backend.services.records import RecordManager

router = APIRouter()


class CalendarMonth(BaseModel):
    """Month grid with ``null`` blanks and appointments grouped by day."""

    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    cells: List[Optional[Date]]
    appointments_by_date: Dict[str, List[Appointment]]
    selected: Optional[Date] = None
    selected_appointments: List[Appointment]

    @classmethod
    def from_view(cls, view: MonthView) -> "CalendarMonth":
        return cls.model_validate(view)


@router.get("/{year}/{month}", response_model=CalendarMonth)
def month_view(
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    selected: Optional[Date] = None,
    pad: bool = False,
    manager: RecordManager = Depends(get_record_manager),
) -> CalendarMonth:
    view = build_month_view(
        year, month, manager.list_appointments(), selected=selected, pad=pad
    )
    return CalendarMonth.from_view(view)
