"""Public online booking endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from clinic_backend.dependencies import get_record_manager, get_view_controller
from clinic_backend.models.appointment import Appointment
from clinic_backend.models.booking import OnlineBookingRequest
from clinic_backend.models.patient import Patient
from clinic_backend.services.booking import book_online
from clinic_backend.services.navigation import View, ViewController
from clinic_backend.services.records import RecordManager

router = APIRouter()


class BookingResponse(BaseModel):
    """Patient and appointment created by an online booking."""

    patient: Patient
    appointment: Appointment


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: OnlineBookingRequest,
    manager: RecordManager = Depends(get_record_manager),
    view: ViewController = Depends(get_view_controller),
) -> BookingResponse:
    """Register the patient, book the day and show the appointments screen."""

    result = book_online(manager, payload.patient_fields(), payload.date)
    view.switch(View.APPOINTMENTS)
    return BookingResponse(patient=result.patient, appointment=result.appointment)
