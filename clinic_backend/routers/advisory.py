"""AI advisory endpoints: knowledge search and per-patient notes."""

from __future__ import annotations

from typing import Awaitable, Callable, List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, field_validator

from clinic_backend.dependencies import (
    get_advisory_gateway,
    get_record_manager,
    get_task_registry,
)
from clinic_backend.errors import AdvisoryError
from clinic_backend.models.base import RecordModel
from clinic_backend.services.advisory import AdvisoryGateway, SearchResponse
from clinic_backend.services.advisory_tasks import AdvisoryTaskRegistry
from clinic_backend.services.navigation import View
from clinic_backend.services.records import RecordManager
from clinic_backend.services.wellness_plan import PlanSection, render_wellness_plan

router = APIRouter()

T = TypeVar("T")


class SearchRequest(RecordModel):
    """Open knowledge search query."""

    query: str = Field(min_length=1)
    request_id: str = Field(default="search", alias="requestId")

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Query must not be blank")
        return value


class AdvisoryRequest(RecordModel):
    """Optional request id for a per-patient advisory call."""

    request_id: Optional[str] = Field(default=None, alias="requestId")


class AdvisoryText(RecordModel):
    """Generated note for one patient."""

    patient_id: str = Field(alias="patientId")
    content: str


class WellnessPlanResponse(AdvisoryText):
    """Wellness plan text plus its headed sections."""

    sections: List[PlanSection]


async def _run(
    tasks: AdvisoryTaskRegistry,
    screen: View,
    request_id: str,
    work: Callable[[], Awaitable[T]],
) -> T:
    try:
        return await tasks.run(screen.value, request_id, work())
    except AdvisoryError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc


@router.post("/search", response_model=SearchResponse)
async def search(
    payload: SearchRequest,
    gateway: AdvisoryGateway = Depends(get_advisory_gateway),
    tasks: AdvisoryTaskRegistry = Depends(get_task_registry),
) -> SearchResponse:
    return await _run(
        tasks, View.SEARCH, payload.request_id, lambda: gateway.search(payload.query)
    )


@router.post("/patients/{patient_id}/insight", response_model=AdvisoryText)
async def patient_insight(
    patient_id: str,
    payload: Optional[AdvisoryRequest] = None,
    manager: RecordManager = Depends(get_record_manager),
    gateway: AdvisoryGateway = Depends(get_advisory_gateway),
    tasks: AdvisoryTaskRegistry = Depends(get_task_registry),
) -> AdvisoryText:
    patient = manager.get_patient(patient_id)
    request_id = (payload and payload.request_id) or f"insight:{patient_id}"
    content = await _run(
        tasks, View.PATIENTS, request_id, lambda: gateway.patient_insight(patient)
    )
    return AdvisoryText(patient_id=patient_id, content=content)


@router.post("/patients/{patient_id}/dosha", response_model=AdvisoryText)
async def dosha_analysis(
    patient_id: str,
    payload: Optional[AdvisoryRequest] = None,
    manager: RecordManager = Depends(get_record_manager),
    gateway: AdvisoryGateway = Depends(get_advisory_gateway),
    tasks: AdvisoryTaskRegistry = Depends(get_task_registry),
) -> AdvisoryText:
    patient = manager.get_patient(patient_id)
    request_id = (payload and payload.request_id) or f"dosha:{patient_id}"
    content = await _run(
        tasks, View.PATIENTS, request_id, lambda: gateway.dosha_analysis(patient)
    )
    return AdvisoryText(patient_id=patient_id, content=content)


@router.post("/patients/{patient_id}/wellness-plan", response_model=WellnessPlanResponse)
async def wellness_plan(
    patient_id: str,
    payload: Optional[AdvisoryRequest] = None,
    manager: RecordManager = Depends(get_record_manager),
    gateway: AdvisoryGateway = Depends(get_advisory_gateway),
    tasks: AdvisoryTaskRegistry = Depends(get_task_registry),
) -> WellnessPlanResponse:
    patient = manager.get_patient(patient_id)
    request_id = (payload and payload.request_id) or f"wellness-plan:{patient_id}"
    content = await _run(
        tasks, View.PATIENTS, request_id, lambda: gateway.wellness_plan(patient)
    )
    return WellnessPlanResponse(
        patient_id=patient_id,
        content=content,
        sections=render_wellness_plan(content),
    )
