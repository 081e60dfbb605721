"""
Main API v1 router.

Aggregates the routers of every module.

Usage in main.py:
    from ehrcloud.api.v1.router import api_router

    app.include_router(api_router)
"""
from fastapi import APIRouter, Depends

from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.database.session import check_database_connection

from .auth.routes import router as auth_router
from .tenants.routes import router as tenants_router
from .platform.routes import router as platform_router
from .user.routes import router as user_router
from .patient.routes import router as patient_router
from .doctor.routes import router as doctor_router
from .staff.routes import router as staff_router
from .appointment.routes import router as appointment_router
from .prescription.routes import router as prescription_router
from .report.routes import router as report_router
from .reminder.routes import router as reminder_router


# =============================================================================
# MAIN ROUTER
# =============================================================================

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router)
api_router.include_router(tenants_router)
api_router.include_router(platform_router)
api_router.include_router(user_router)
api_router.include_router(patient_router)
api_router.include_router(doctor_router)
api_router.include_router(staff_router)
api_router.include_router(appointment_router)
api_router.include_router(prescription_router)
api_router.include_router(report_router)
api_router.include_router(reminder_router)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@api_router.get(
    "/health",
    tags=["System"],
    summary="Health check",
    description="API and database status. No tenant or credential required.",
)
def health_check(context: AppContext = Depends(get_app_context)):
    database_ok = check_database_connection(context.engine)
    return {
        "success": True,
        "data": {
            "status": "healthy" if database_ok else "degraded",
            "version": context.settings.APP_VERSION,
            "environment": context.settings.ENVIRONMENT,
            "database": "connected" if database_ok else "unavailable",
        },
    }
