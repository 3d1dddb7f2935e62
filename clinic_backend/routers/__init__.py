"""API router initializers."""

from fastapi import APIRouter


def get_api_router() -> APIRouter:
    """Construct and return the API router."""

    from clinic_backend.routers.advisory import router as advisory_router
    from clinic_backend.routers.appointments import router as appointments_router
    from clinic_backend.routers.booking import router as booking_router
    from clinic_backend.routers.calendar import router as calendar_router
    from clinic_backend.routers.dashboard import router as dashboard_router
    from clinic_backend.routers.patients import router as patients_router
    from clinic_backend.routers.view import router as view_router

    api_router = APIRouter()
    api_router.include_router(patients_router, prefix="/patients", tags=["patients"])
    api_router.include_router(
        appointments_router, prefix="/appointments", tags=["appointments"]
    )
    api_router.include_router(booking_router, prefix="/booking", tags=["booking"])
    api_router.include_router(calendar_router, prefix="/calendar", tags=["calendar"])
    api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    api_router.include_router(advisory_router, prefix="/advisory", tags=["advisory"])
    api_router.include_router(view_router, tags=["view"])
    return api_router
