"""Dashboard statistics endpoint."""

from fastapi import APIRouter, Depends

from clinic_backend.dependencies import get_record_manager
from clinic_backend.services.dashboard import DashboardSummary, build_summary
from clinic_backend.services.records import RecordManager

router = APIRouter()


@router.get("", response_model=DashboardSummary)
def dashboard(manager: RecordManager = Depends(get_record_manager)) -> DashboardSummary:
    return build_summary(manager.list_patients(), manager.list_appointments())
