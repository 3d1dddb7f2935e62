"""Appointment endpoints."""

from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from clinic_backend.dependencies import get_record_manager
from clinic_backend.models.appointment import Appointment, AppointmentFields
from clinic_backend.services.records import RecordManager

router = APIRouter()


@router.get("", response_model=List[Appointment])
def list_appointments(
    date: Optional[Date] = None,
    manager: RecordManager = Depends(get_record_manager),
) -> List[Appointment]:
    return manager.list_appointments(date.isoformat() if date else None)


@router.post("", response_model=Appointment, status_code=status.HTTP_201_CREATED)
def add_appointment(
    payload: AppointmentFields,
    manager: RecordManager = Depends(get_record_manager),
) -> Appointment:
    return manager.add_appointment(payload)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_appointment(
    appointment_id: str,
    manager: RecordManager = Depends(get_record_manager),
) -> Response:
    manager.remove_appointment(appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
