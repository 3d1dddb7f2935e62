"""Aggregate statistics shown on the clinic dashboard."""

from __future__ import annotations

from collections import Counter
from datetime import date as Date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from clinic_backend.models.appointment import Appointment
from clinic_backend.models.patient import GENDERS, Patient

TOP_CONDITIONS_LIMIT = 5


class GenderDistribution(BaseModel):
    """Patient counts and percentage labels per gender."""

    counts: Dict[str, int]
    percentages: Dict[str, str]
    unspecified: int = 0


class ConditionCount(BaseModel):
    """Number of patients sharing a condition."""

    condition: str
    count: int


class DashboardSummary(BaseModel):
    """Figures shown on the dashboard screen."""

    total_patients: int
    todays_appointments: int
    gender_distribution: GenderDistribution
    top_conditions: List[ConditionCount]


def todays_appointment_count(
    appointments: Sequence[Appointment], today: Optional[Date] = None
) -> int:
    key = (today or Date.today()).isoformat()
    return sum(1 for item in appointments if item.date == key)


def format_percentage(count: int, total: int) -> str:
    """Return ``count / total`` as a percentage with one decimal, half-up."""

    if total <= 0:
        return "0.0"
    value = Decimal(count) * 100 / Decimal(total)
    return str(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def gender_distribution(patients: Sequence[Patient]) -> GenderDistribution:
    """Tally patients by gender.

    Values outside ``GENDERS`` land in ``unspecified`` instead of a bucket;
    percentages are taken over every patient.
    """

    counts = {gender: 0 for gender in GENDERS}
    unspecified = 0
    for patient in patients:
        if patient.gender in counts:
            counts[patient.gender] += 1
        else:
            unspecified += 1

    total = len(patients)
    return GenderDistribution(
        counts=counts,
        percentages={
            gender: format_percentage(count, total) for gender, count in counts.items()
        },
        unspecified=unspecified,
    )


def top_conditions(
    patients: Sequence[Patient], limit: int = TOP_CONDITIONS_LIMIT
) -> List[Tuple[str, int]]:
    """Most frequent trimmed conditions; ties keep first-seen order."""

    counter: Counter = Counter()
    for patient in patients:
        condition = patient.condition.strip()
        if condition:
            counter[condition] += 1

    ranked = sorted(counter.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def build_summary(
    patients: Sequence[Patient],
    appointments: Sequence[Appointment],
    today: Optional[Date] = None,
) -> DashboardSummary:
    return DashboardSummary(
        total_patients=len(patients),
        todays_appointments=todays_appointment_count(appointments, today),
        gender_distribution=gender_distribution(patients),
        top_conditions=[
            ConditionCount(condition=condition, count=count)
            for condition, count in top_conditions(patients)
        ],
    )
