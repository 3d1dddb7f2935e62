"""Cancellation of superseded and abandoned advisory requests."""

import asyncio

import pytest

from clinic_backend.errors import AdvisoryCancelledError
from clinic_backend.services.advisory_tasks import AdvisoryTaskRegistry
from clinic_backend.services.navigation import View, ViewController
from clinic_backend.services.records import RecordManager
from clinic_backend.models.patient import PatientFields


async def _slow(value: str, release: asyncio.Event) -> str:
    await release.wait()
    return value


@pytest.mark.anyio
async def test_new_request_supersedes_the_previous_one() -> None:
    registry = AdvisoryTaskRegistry()
    release = asyncio.Event()

    first = asyncio.ensure_future(registry.run("search", "search", _slow("old", release)))
    await asyncio.sleep(0)
    second = asyncio.ensure_future(registry.run("search", "search", _slow("new", release)))
    await asyncio.sleep(0)
    release.set()

    with pytest.raises(AdvisoryCancelledError):
        await first
    assert await second == "new"
    assert registry.pending("search") == set()


@pytest.mark.anyio
async def test_different_request_ids_run_side_by_side() -> None:
    registry = AdvisoryTaskRegistry()
    release = asyncio.Event()

    insight = asyncio.ensure_future(registry.run("patients", "insight", _slow("i", release)))
    dosha = asyncio.ensure_future(registry.run("patients", "dosha", _slow("d", release)))
    await asyncio.sleep(0)
    assert registry.pending("patients") == {"insight", "dosha"}
    release.set()

    assert await insight == "i"
    assert await dosha == "d"


@pytest.mark.anyio
async def test_switching_view_cancels_work_on_the_screen_left(
    manager: RecordManager,
) -> None:
    registry = AdvisoryTaskRegistry()
    view = ViewController(manager, registry)
    view.switch(View.SEARCH)
    release = asyncio.Event()

    pending = asyncio.ensure_future(registry.run("search", "search", _slow("late", release)))
    await asyncio.sleep(0)
    view.switch(View.DASHBOARD)

    with pytest.raises(AdvisoryCancelledError):
        await pending


@pytest.mark.anyio
async def test_selecting_another_patient_cancels_patient_work(
    manager: RecordManager,
) -> None:
    registry = AdvisoryTaskRegistry()
    view = ViewController(manager, registry)
    first = manager.add_patient(PatientFields(name="First", age=30, condition="Fatigue"))
    second = manager.add_patient(PatientFields(name="Second", age=30, condition="Fatigue"))
    view.select_patient(first.id)
    release = asyncio.Event()

    pending = asyncio.ensure_future(registry.run("patients", "insight", _slow("x", release)))
    await asyncio.sleep(0)
    view.select_patient(second.id)

    with pytest.raises(AdvisoryCancelledError):
        await pending
    assert view.selected_patient_id == second.id


def test_removing_the_selected_patient_clears_the_selection(
    manager: RecordManager,
) -> None:
    view = ViewController(manager, AdvisoryTaskRegistry())
    patient = manager.add_patient(PatientFields(name="First", age=30, condition="Fatigue"))
    view.select_patient(patient.id)

    manager.remove_patient(patient.id)

    assert view.selected_patient_id is None
