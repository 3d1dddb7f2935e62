"""Screen navigation endpoints."""

from __future__ import annotations

from datetime import date as Date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from clinic_backend.dependencies import (
    get_app_settings,
    get_record_manager,
    get_view_controller,
)
from clinic_backend.models.base import RecordModel
from clinic_backend.routers.calendar import CalendarMonth
from clinic_backend.services.navigation import View, ViewController
from clinic_backend.services.records import RecordManager
from clinic_backend.utils.config import Settings

router = APIRouter()


class ViewState(RecordModel):
    """Active screen, selected patient and calendar position."""

    active: View
    selected_patient_id: Optional[str] = Field(default=None, alias="selectedPatientId")
    calendar_year: int = Field(alias="calendarYear")
    calendar_month: int = Field(alias="calendarMonth")
    selected_date: Optional[Date] = Field(default=None, alias="selectedDate")


class SwitchViewRequest(BaseModel):
    """Screen to make active."""

    view: View


class SelectPatientRequest(RecordModel):
    """Patient to select; null clears the selection."""

    patient_id: Optional[str] = Field(default=None, alias="patientId")


class SelectDateRequest(BaseModel):
    """Calendar day to select."""

    date: Optional[Date] = None


class AboutInfo(BaseModel):
    """Clinic and application details for the about screen."""

    app_name: str
    clinic_name: str
    doctor_name: str
    version: str


def _state(view: ViewController) -> ViewState:
    return ViewState(
        active=view.active,
        selected_patient_id=view.selected_patient_id,
        calendar_year=view.calendar.year,
        calendar_month=view.calendar.month,
        selected_date=view.calendar.selected,
    )


@router.get("/view", response_model=ViewState)
def get_view(view: ViewController = Depends(get_view_controller)) -> ViewState:
    return _state(view)


@router.put("/view", response_model=ViewState)
def switch_view(
    payload: SwitchViewRequest,
    view: ViewController = Depends(get_view_controller),
) -> ViewState:
    view.switch(payload.view)
    return _state(view)


@router.put("/view/patient", response_model=ViewState)
def select_patient(
    payload: SelectPatientRequest,
    view: ViewController = Depends(get_view_controller),
) -> ViewState:
    view.select_patient(payload.patient_id)
    return _state(view)


@router.get("/view/calendar", response_model=CalendarMonth)
def current_month(
    pad: bool = False,
    view: ViewController = Depends(get_view_controller),
    manager: RecordManager = Depends(get_record_manager),
) -> CalendarMonth:
    return CalendarMonth.from_view(view.calendar.view(manager.list_appointments(), pad=pad))


@router.post("/view/calendar/previous", response_model=CalendarMonth)
def previous_month(
    view: ViewController = Depends(get_view_controller),
    manager: RecordManager = Depends(get_record_manager),
) -> CalendarMonth:
    view.calendar.previous()
    return CalendarMonth.from_view(view.calendar.view(manager.list_appointments()))


@router.post("/view/calendar/next", response_model=CalendarMonth)
def next_month(
    view: ViewController = Depends(get_view_controller),
    manager: RecordManager = Depends(get_record_manager),
) -> CalendarMonth:
    view.calendar.next()
    return CalendarMonth.from_view(view.calendar.view(manager.list_appointments()))


@router.post("/view/calendar/select", response_model=CalendarMonth)
def select_date(
    payload: SelectDateRequest,
    view: ViewController = Depends(get_view_controller),
    manager: RecordManager = Depends(get_record_manager),
) -> CalendarMonth:
    view.calendar.select(payload.date)
    return CalendarMonth.from_view(view.calendar.view(manager.list_appointments()))


@router.get("/about", response_model=AboutInfo)
def about(settings: Settings = Depends(get_app_settings)) -> AboutInfo:
    return AboutInfo(
        app_name=settings.app_name,
        clinic_name=settings.clinic_name,
        doctor_name=settings.doctor_name,
        version=settings.app_version,
    )
