"""Online booking request model."""

from __future__ import annotations

from datetime import date as Date

from pydantic import Field, field_validator

from clinic_backend.models.patient import PatientFields

ONLINE_BOOKING_HISTORY = "First visit from online booking."


class OnlineBookingRequest(PatientFields):
    """Public booking form: a new patient plus the requested day."""

    email: str = Field(min_length=1)
    date: Date

    @field_validator("date")
    @classmethod
    def _reject_past_date(cls, value: Date) -> Date:
        if value < Date.today():
            raise ValueError("Appointment date must not be in the past")
        return value

    def patient_fields(self) -> PatientFields:
        """Return the patient part of the booking."""

        return PatientFields(
            name=self.name,
            age=self.age,
            gender=self.gender,
            condition=self.condition,
            history=ONLINE_BOOKING_HISTORY,
            email=self.email,
            phone=self.phone,
        )
