"""Month grid and day index for the appointment calendar."""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR
from datetime import date as Date
from typing import Dict, List, Optional, Sequence, Tuple

from clinic_backend.models.appointment import Appointment

DAYS_PER_WEEK = 7


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st with Sunday as 0."""

    monday_based, _ = calendar.monthrange(year, month)
    return (monday_based + 1) % DAYS_PER_WEEK


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move ``offset`` months from (year, month), rolling over year ends."""

    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int, *, pad: bool = False) -> List[Optional[Date]]:
    """Calendar cells for a month.

    Leading ``None`` blanks cover the weekdays before the 1st, followed by
    one date per day. With ``pad`` the last week is completed with blanks.
    """

    cells: List[Optional[Date]] = [None] * first_weekday(year, month)
    cells.extend(
        Date(year, month, day) for day in range(1, days_in_month(year, month) + 1)
    )
    if pad:
        cells.extend([None] * (-len(cells) % DAYS_PER_WEEK))
    return cells


def index_by_date(appointments: Sequence[Appointment]) -> Dict[str, List[Appointment]]:
    """Group appointments by their ``YYYY-MM-DD`` day key."""

    index: Dict[str, List[Appointment]] = defaultdict(list)
    for appointment in appointments:
        index[appointment.date].append(appointment)
    return dict(index)


@dataclass
class MonthView:
    year: int
    month: int
    cells: List[Optional[Date]]
    appointments_by_date: Dict[str, List[Appointment]]
    selected: Optional[Date] = None
    selected_appointments: List[Appointment] = field(default_factory=list)


def build_month_view(
    year: int,
    month: int,
    appointments: Sequence[Appointment],
    *,
    selected: Optional[Date] = None,
    pad: bool = False,
) -> MonthView:
    """Project the appointment collection onto one displayed month."""

    index = index_by_date(appointments)
    return MonthView(
        year=year,
        month=month,
        cells=month_grid(year, month, pad=pad),
        appointments_by_date=index,
        selected=selected,
        selected_appointments=(
            list(index.get(selected.isoformat(), [])) if selected else []
        ),
    )


class CalendarCursor:
    """Displayed month plus the selected day.

    The selected day may fall outside the displayed month. Navigation stops
    at the first and last months a date can represent.
    """

    def __init__(self, today: Optional[Date] = None) -> None:
        today = today or Date.today()
        self.year = today.year
        self.month = today.month
        self.selected: Optional[Date] = today

    def previous(self) -> None:
        self._move(-1)

    def next(self) -> None:
        self._move(1)

    def select(self, day: Optional[Date]) -> None:
        self.selected = day

    def view(self, appointments: Sequence[Appointment], *, pad: bool = False) -> MonthView:
        return build_month_view(
            self.year, self.month, appointments, selected=self.selected, pad=pad
        )

    def _move(self, offset: int) -> None:
        year, month = shift_month(self.year, self.month, offset)
        if MINYEAR <= year <= MAXYEAR:
            self.year, self.month = year, month
