"""Patient record endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from clinic_backend.dependencies import get_record_manager
from clinic_backend.models.patient import Patient, PatientFields
from clinic_backend.services.records import RecordManager

router = APIRouter()


@router.get("", response_model=List[Patient])
def list_patients(
    search: Optional[str] = None,
    manager: RecordManager = Depends(get_record_manager),
) -> List[Patient]:
    """Return patients sorted by name, optionally filtered by name."""

    return manager.list_patients(search)


@router.post("", response_model=Patient, status_code=status.HTTP_201_CREATED)
def add_patient(
    payload: PatientFields,
    manager: RecordManager = Depends(get_record_manager),
) -> Patient:
    return manager.add_patient(payload)


@router.get("/{patient_id}", response_model=Patient)
def get_patient(
    patient_id: str,
    manager: RecordManager = Depends(get_record_manager),
) -> Patient:
    return manager.get_patient(patient_id)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_patient(
    patient_id: str,
    manager: RecordManager = Depends(get_record_manager),
) -> Response:
    """Remove a patient and their appointments; unknown ids are ignored."""

    manager.remove_patient(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
