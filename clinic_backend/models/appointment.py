"""Appointment record models."""

from __future__ import annotations

from datetime import date as Date

from pydantic import Field

from clinic_backend.models.base import RecordModel


class AppointmentFields(RecordModel):
    """Appointment data supplied by the caller on creation."""

    patient_id: str = Field(alias="patientId", min_length=1)
    date: Date
    notes: str = Field(default="")


class Appointment(RecordModel):
    """An appointment on a calendar day.

    ``patient_name`` is copied from the patient at creation time. ``date`` is
    the ``YYYY-MM-DD`` day key used for sorting and calendar grouping.
    """

    id: str
    patient_id: str = Field(alias="patientId")
    patient_name: str = Field(alias="patientName")
    date: str
    notes: str = ""
