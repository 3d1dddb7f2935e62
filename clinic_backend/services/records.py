"""Patient and appointment collections and their mutation operations."""

from __future__ import annotations

import logging
import threading
import unicodedata
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date as Date
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from clinic_backend.errors import PatientNotFoundError, StoreError
from clinic_backend.models.appointment import Appointment, AppointmentFields
from clinic_backend.models.patient import Patient, PatientFields
from clinic_backend.services.seed import sample_appointments, sample_patients
from clinic_backend.services.store import KeyValueStore

LOGGER = logging.getLogger(__name__)

PATIENTS = "patients"
APPOINTMENTS = "appointments"
LAST_VISIT_FORMAT = "%m/%d/%Y"

_PATIENT_LIST = TypeAdapter(List[Patient])
_APPOINTMENT_LIST = TypeAdapter(List[Appointment])
_ADAPTERS: Dict[str, TypeAdapter] = {
    PATIENTS: _PATIENT_LIST,
    APPOINTMENTS: _APPOINTMENT_LIST,
}

ChangeListener = Callable[[str], None]


@dataclass(frozen=True)
class StoreKeys:
    """Store keys holding each collection."""

    patients: str = "ayurvedic_patients"
    appointments: str = "ayurvedic_appointments"

    def for_collection(self, name: str) -> str:
        return getattr(self, name)


@dataclass
class ClinicState:
    """The two top-level collections owned by the running application."""

    patients: List[Patient] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)


def dump_collection(name: str, records: Sequence) -> str:
    """Serialize a collection to the JSON text kept in the store."""

    payload = _ADAPTERS[name].dump_json(list(records), by_alias=True, exclude_none=True)
    return payload.decode("utf-8")


def parse_collection(name: str, raw: str) -> list:
    """Parse stored JSON text back into records."""

    try:
        return _ADAPTERS[name].validate_json(raw)
    except ValidationError as exc:
        LOGGER.debug("Invalid %s payload (truncated): %s", name, raw[:500])
        raise StoreError(f"Stored {name} payload is invalid") from exc


def load_state(
    store: KeyValueStore,
    keys: StoreKeys = StoreKeys(),
    *,
    seed: bool = True,
    today: Optional[Date] = None,
) -> ClinicState:
    """Load both collections, seeding and writing back any absent key."""

    seeds: Dict[str, Callable[[], list]] = {
        PATIENTS: (lambda: sort_patients(sample_patients())) if seed else list,
        APPOINTMENTS: (lambda: sample_appointments(today)) if seed else list,
    }

    loaded: Dict[str, list] = {}
    for name, factory in seeds.items():
        key = keys.for_collection(name)
        raw = store.load(key)
        if raw is None:
            records = factory()
            LOGGER.info("Key %s absent; seeding %d %s", key, len(records), name)
            store.save(key, dump_collection(name, records))
        else:
            records = parse_collection(name, raw)
        loaded[name] = records

    return ClinicState(**loaded)


def name_sort_key(patient: Patient) -> tuple:
    decomposed = unicodedata.normalize("NFKD", patient.name)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return (base.casefold(), patient.name)


def sort_patients(patients: Iterable[Patient]) -> List[Patient]:
    """Order patients by name, ignoring case and accents."""

    return sorted(patients, key=name_sort_key)


def sort_appointments(appointments: Iterable[Appointment]) -> List[Appointment]:
    """Order appointments by day; same-day entries keep insertion order."""

    return sorted(appointments, key=lambda item: item.date)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class RecordManager:
    """Single writer for the patient and appointment collections.

    Every mutation persists the touched collections through the store before
    the in-memory state is replaced, then notifies subscribers. A failed write
    leaves the state as it was. Queries take the same lock, so other threads
    never observe a transaction before it commits.
    """

    def __init__(
        self,
        state: ClinicState,
        store: KeyValueStore,
        keys: StoreKeys = StoreKeys(),
        *,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.state = state
        self._store = store
        self._keys = keys
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: List[ChangeListener] = []
        self._pending: Optional[set] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_patients(self, search: Optional[str] = None) -> List[Patient]:
        with self._lock:
            patients = list(self.state.patients)
        if not search:
            return patients

        needle = search.lower()
        return [item for item in patients if needle in item.name.lower()]

    def get_patient(self, patient_id: str) -> Patient:
        with self._lock:
            for patient in self.state.patients:
                if patient.id == patient_id:
                    return patient
        raise PatientNotFoundError(patient_id)

    def list_appointments(self, day: Optional[str] = None) -> List[Appointment]:
        with self._lock:
            appointments = list(self.state.appointments)
        if day is None:
            return appointments
        return [item for item in appointments if item.date == day]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_patient(self, data: PatientFields) -> Patient:
        """Create a patient and return it with its generated id."""

        with self._lock:
            now = self._clock()
            patient = Patient(
                id=self._new_id(now, (item.id for item in self.state.patients)),
                last_visit=now.strftime(LAST_VISIT_FORMAT),
                **data.model_dump(),
            )
            self._commit(patients=sort_patients([*self.state.patients, patient]))

        LOGGER.info("Added patient id=%s", patient.id)
        return patient

    def remove_patient(self, patient_id: str) -> None:
        """Remove a patient and every appointment referencing them."""

        with self._lock:
            if not any(item.id == patient_id for item in self.state.patients):
                LOGGER.debug("remove_patient: id=%s not found; no-op", patient_id)
                return

            patients = [item for item in self.state.patients if item.id != patient_id]
            appointments = [
                item for item in self.state.appointments if item.patient_id != patient_id
            ]
            removed = len(self.state.appointments) - len(appointments)
            self._commit(patients=patients, appointments=appointments)

        LOGGER.info(
            "Removed patient id=%s with %d appointment(s)", patient_id, removed
        )

    def add_appointment(self, data: AppointmentFields) -> Appointment:
        """Create an appointment for an existing patient.

        Overlapping appointments on the same day are allowed.
        """

        with self._lock:
            patient = self.get_patient(data.patient_id)
            now = self._clock()
            appointment = Appointment(
                id=self._new_id(now, (item.id for item in self.state.appointments)),
                patient_id=patient.id,
                patient_name=patient.name,
                date=data.date.isoformat(),
                notes=data.notes,
            )
            self._commit(
                appointments=sort_appointments([*self.state.appointments, appointment])
            )

        LOGGER.info(
            "Added appointment id=%s patient=%s date=%s",
            appointment.id,
            appointment.patient_id,
            appointment.date,
        )
        return appointment

    def remove_appointment(self, appointment_id: str) -> None:
        with self._lock:
            appointments = [
                item for item in self.state.appointments if item.id != appointment_id
            ]
            if len(appointments) == len(self.state.appointments):
                LOGGER.debug(
                    "remove_appointment: id=%s not found; no-op", appointment_id
                )
                return
            self._commit(appointments=appointments)

        LOGGER.info("Removed appointment id=%s", appointment_id)

    @contextmanager
    def transaction(self) -> Iterator["RecordManager"]:
        """Group mutations into one store write.

        Changes become visible in memory as they are made; on exit the touched
        collections are written with a single ``save_many``. Any exception
        restores both collections and nothing is written.
        """

        with self._lock:
            if self._pending is not None:
                yield self
                return

            snapshot = (self.state.patients, self.state.appointments)
            self._pending = set()
            try:
                yield self
                touched = {
                    name: getattr(self.state, name)
                    for name in (PATIENTS, APPOINTMENTS)
                    if name in self._pending
                }
                self._persist(touched)
            except BaseException:
                self.state.patients, self.state.appointments = snapshot
                raise
            finally:
                self._pending = None

            self._notify(touched)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the name of each changed collection."""

        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _new_id(now: datetime, existing: Iterable[str]) -> str:
        base = (
            now.astimezone(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        taken = set(existing)
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _commit(
        self,
        *,
        patients: Optional[List[Patient]] = None,
        appointments: Optional[List[Appointment]] = None,
    ) -> None:
        changed: Dict[str, list] = {}
        if patients is not None:
            changed[PATIENTS] = patients
        if appointments is not None:
            changed[APPOINTMENTS] = appointments

        if self._pending is not None:
            for name, records in changed.items():
                setattr(self.state, name, records)
            self._pending.update(changed)
            return

        self._persist(changed)
        for name, records in changed.items():
            setattr(self.state, name, records)
        self._notify(changed)

    def _persist(self, changed: Dict[str, list]) -> None:
        payload = {
            self._keys.for_collection(name): dump_collection(name, records)
            for name, records in changed.items()
        }
        if len(payload) == 1:
            key, value = next(iter(payload.items()))
            self._store.save(key, value)
        elif payload:
            self._store.save_many(payload)

    def _notify(self, changed: Iterable[str]) -> None:
        for name in changed:
            for listener in list(self._listeners):
                listener(name)
