"""FastAPI dependency providers backed by ``app.state``."""

from fastapi import Request

from clinic_backend.services.advisory import AdvisoryGateway
from clinic_backend.services.advisory_tasks import AdvisoryTaskRegistry
from clinic_backend.services.navigation import ViewController
from clinic_backend.services.records import RecordManager
from clinic_backend.utils.config import Settings


def get_record_manager(request: Request) -> RecordManager:
    return request.app.state.records


def get_view_controller(request: Request) -> ViewController:
    return request.app.state.view


def get_advisory_gateway(request: Request) -> AdvisoryGateway:
    return request.app.state.advisory


def get_task_registry(request: Request) -> AdvisoryTaskRegistry:
    return request.app.state.advisory_tasks


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
