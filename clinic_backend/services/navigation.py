"""Top-level screen state: active view, selected patient and calendar cursor."""

from __future__ import annotations

import logging
from datetime import date as Date
from enum import Enum
from typing import Optional

from calendar_service.month_view import CalendarCursor
from clinic_backend.errors import PatientNotFoundError
from clinic_backend.services.advisory_tasks import AdvisoryTaskRegistry
from clinic_backend.services.records import PATIENTS, RecordManager

LOGGER = logging.getLogger(__name__)


class View(str, Enum):
    DASHBOARD = "dashboard"
    SEARCH = "search"
    PATIENTS = "patients"
    APPOINTMENTS = "appointments"
    ABOUT = "about"
    ONLINE_BOOKING = "online-booking"


class ViewController:
    """Switches between screens; holds no record logic of its own."""

    def __init__(
        self,
        manager: RecordManager,
        tasks: AdvisoryTaskRegistry,
        *,
        today: Optional[Date] = None,
    ) -> None:
        self._manager = manager
        self._tasks = tasks
        self.active = View.DASHBOARD
        self.selected_patient_id: Optional[str] = None
        self.calendar = CalendarCursor(today)
        manager.subscribe(self._on_records_changed)

    def switch(self, view: View) -> View:
        """Make ``view`` active, cancelling advisory work on the screen left."""

        if view != self.active:
            self._tasks.cancel(self.active.value)
            LOGGER.debug("View switch %s -> %s", self.active.value, view.value)
            self.active = view
        return self.active

    def select_patient(self, patient_id: Optional[str]) -> Optional[str]:
        if patient_id is not None:
            self._manager.get_patient(patient_id)

        if patient_id != self.selected_patient_id:
            self._tasks.cancel(View.PATIENTS.value)
            self.selected_patient_id = patient_id
        return self.selected_patient_id

    def _on_records_changed(self, collection: str) -> None:
        if collection != PATIENTS or self.selected_patient_id is None:
            return

        try:
            self._manager.get_patient(self.selected_patient_id)
        except PatientNotFoundError:
            LOGGER.debug("Selected patient %s removed", self.selected_patient_id)
            self.select_patient(None)
