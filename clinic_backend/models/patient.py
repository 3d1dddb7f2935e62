"""Patient record models."""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import Field

from clinic_backend.models.base import RecordModel

Gender = Literal["Male", "Female", "Other"]
GENDERS: Tuple[str, ...] = ("Male", "Female", "Other")


class PatientFields(RecordModel):
    """Patient data supplied by the caller on creation."""

    name: str = Field(min_length=1)
    age: int = Field(gt=0)
    gender: Gender = "Male"
    condition: str = Field(min_length=1)
    history: str = Field(default="")
    email: Optional[str] = None
    phone: Optional[str] = None


class Patient(RecordModel):
    """A patient record as held in memory and persisted.

    ``gender`` is kept as free text here so records written by older clients
    still load; request models restrict it to ``GENDERS``.
    """

    id: str
    name: str
    age: int
    gender: str
    condition: str = ""
    history: str = ""
    last_visit: str = Field(alias="lastVisit")
    email: Optional[str] = None
    phone: Optional[str] = None
