"""Online booking: register a new patient and book their first visit."""

from __future__ import annotations

import logging
from datetime import date as Date
from typing import NamedTuple

from clinic_backend.models.appointment import Appointment, AppointmentFields
from clinic_backend.models.patient import Patient, PatientFields
from clinic_backend.services.records import RecordManager

LOGGER = logging.getLogger(__name__)

ONLINE_BOOKING_NOTES = "First Consultation (Online Booking)"


class BookingResult(NamedTuple):
    patient: Patient
    appointment: Appointment


def book_online(
    manager: RecordManager,
    patient_fields: PatientFields,
    day: Date,
) -> BookingResult:
    """Create the patient and their appointment as one store transaction.

    If the appointment cannot be created the patient is not kept either.
    """

    with manager.transaction():
        patient = manager.add_patient(patient_fields)
        appointment = manager.add_appointment(
            AppointmentFields(
                patient_id=patient.id,
                date=day,
                notes=ONLINE_BOOKING_NOTES,
            )
        )

    LOGGER.info(
        "Online booking: patient=%s appointment=%s date=%s",
        patient.id,
        appointment.id,
        appointment.date,
    )
    return BookingResult(patient=patient, appointment=appointment)
