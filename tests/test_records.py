"""Record manager mutations, ordering and cascade behaviour."""

from datetime import date, datetime, timezone
from typing import List

import pytest

from clinic_backend.errors import PatientNotFoundError, StoreError
from clinic_backend.models.appointment import AppointmentFields
from clinic_backend.models.patient import PatientFields
from clinic_backend.services.records import (
    APPOINTMENTS,
    PATIENTS,
    ClinicState,
    RecordManager,
    load_state,
)
from clinic_backend.services.store import MemoryKeyValueStore


def _fields(name: str, condition: str = "Fatigue", gender: str = "Female") -> PatientFields:
    return PatientFields(name=name, age=30, gender=gender, condition=condition)


def _book(manager: RecordManager, patient_id: str, day: str, notes: str = ""):
    return manager.add_appointment(
        AppointmentFields(patient_id=patient_id, date=date.fromisoformat(day), notes=notes)
    )


def test_add_patient_assigns_id_and_last_visit(manager: RecordManager) -> None:
    patient = manager.add_patient(_fields("Test User"))

    assert patient.id == "2025-03-01T09:00:00.000Z"
    assert patient.last_visit == "03/01/2025"
    assert manager.get_patient(patient.id) == patient


def test_patients_stay_sorted_by_name(manager: RecordManager) -> None:
    for name in ["rohan Mehta", "Aarav Sharma", "Émile Roux", "Priya Patel", "ananya Iyer"]:
        manager.add_patient(_fields(name))

    names = [item.name for item in manager.list_patients()]
    assert names == ["Aarav Sharma", "ananya Iyer", "Émile Roux", "Priya Patel", "rohan Mehta"]


def test_patient_ids_are_unique_even_with_a_frozen_clock(store: MemoryKeyValueStore) -> None:
    frozen = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    manager = RecordManager(ClinicState(), store, clock=lambda: frozen)

    ids = [manager.add_patient(_fields(f"Patient {index}")).id for index in range(4)]

    assert len(set(ids)) == 4


def test_appointments_sorted_by_date_with_stable_ties(manager: RecordManager) -> None:
    patient = manager.add_patient(_fields("Test User"))
    _book(manager, patient.id, "2025-03-12", "third")
    _book(manager, patient.id, "2025-03-10", "first")
    _book(manager, patient.id, "2025-03-10", "second")
    _book(manager, patient.id, "2025-02-28", "zeroth")

    notes = [item.notes for item in manager.list_appointments()]
    assert notes == ["zeroth", "first", "second", "third"]


def test_overlapping_appointments_are_allowed(manager: RecordManager) -> None:
    patient = manager.add_patient(_fields("Test User"))
    _book(manager, patient.id, "2025-03-10")
    _book(manager, patient.id, "2025-03-10")

    assert len(manager.list_appointments("2025-03-10")) == 2


def test_add_appointment_copies_patient_name(manager: RecordManager) -> None:
    patient = manager.add_patient(_fields("Test User"))

    appointment = _book(manager, patient.id, "2025-03-10")

    assert appointment.patient_id == patient.id
    assert appointment.patient_name == "Test User"
    assert appointment.date == "2025-03-10"


def test_add_appointment_for_unknown_patient_fails(manager: RecordManager) -> None:
    with pytest.raises(PatientNotFoundError):
        _book(manager, "missing", "2025-03-10")

    assert manager.list_appointments() == []


def test_remove_patient_cascades_to_their_appointments_only(manager: RecordManager) -> None:
    first = manager.add_patient(_fields("First"))
    second = manager.add_patient(_fields("Second"))
    _book(manager, first.id, "2025-03-10")
    _book(manager, second.id, "2025-03-11")
    _book(manager, first.id, "2025-03-12")
    before = manager.list_appointments()

    manager.remove_patient(first.id)

    assert [item.id for item in manager.list_patients()] == [second.id]
    assert manager.list_appointments() == [
        item for item in before if item.patient_id != first.id
    ]


def test_remove_patient_persists_both_collections(
    manager: RecordManager, store: MemoryKeyValueStore
) -> None:
    patient = manager.add_patient(_fields("Test User"))
    _book(manager, patient.id, "2025-03-10")

    manager.remove_patient(patient.id)

    reloaded = load_state(store)
    assert reloaded.patients == []
    assert reloaded.appointments == []


def test_removing_unknown_ids_is_a_no_op(
    manager: RecordManager, store: MemoryKeyValueStore
) -> None:
    patient = manager.add_patient(_fields("Test User"))
    _book(manager, patient.id, "2025-03-10")
    patients_before = manager.list_patients()
    appointments_before = manager.list_appointments()
    stored_before = store.snapshot()

    manager.remove_patient("missing")
    manager.remove_appointment("missing")

    assert manager.list_patients() == patients_before
    assert manager.list_appointments() == appointments_before
    assert store.snapshot() == stored_before


def test_remove_appointment(manager: RecordManager) -> None:
    patient = manager.add_patient(_fields("Test User"))
    keep = _book(manager, patient.id, "2025-03-10")
    drop = _book(manager, patient.id, "2025-03-11")

    manager.remove_appointment(drop.id)

    assert manager.list_appointments() == [keep]


def test_search_filters_by_name_case_insensitively(manager: RecordManager) -> None:
    manager.add_patient(_fields("Priya Patel"))
    manager.add_patient(_fields("Rohan Mehta"))

    assert [item.name for item in manager.list_patients("PAT")] == ["Priya Patel"]
    assert manager.list_patients("nobody") == []


def test_listeners_receive_changed_collections(manager: RecordManager) -> None:
    events: List[str] = []
    manager.subscribe(events.append)

    patient = manager.add_patient(_fields("Test User"))
    _book(manager, patient.id, "2025-03-10")
    manager.remove_patient(patient.id)

    assert events == [PATIENTS, APPOINTMENTS, PATIENTS, APPOINTMENTS]


class FailingStore(MemoryKeyValueStore):
    def save(self, key: str, value: str) -> None:
        raise StoreError("quota exceeded")

    def save_many(self, values) -> None:
        raise StoreError("quota exceeded")


def test_failed_write_leaves_memory_unchanged(clock) -> None:
    manager = RecordManager(ClinicState(), FailingStore(), clock=clock)

    with pytest.raises(StoreError):
        manager.add_patient(_fields("Test User"))

    assert manager.list_patients() == []


def test_transaction_writes_once_and_rolls_back_on_error(
    manager: RecordManager, store: MemoryKeyValueStore
) -> None:
    existing = manager.add_patient(_fields("Existing"))
    stored_before = store.snapshot()

    with pytest.raises(PatientNotFoundError):
        with manager.transaction():
            manager.add_patient(_fields("Orphan"))
            _book(manager, "missing", "2025-03-10")

    assert manager.list_patients() == [existing]
    assert store.snapshot() == stored_before
