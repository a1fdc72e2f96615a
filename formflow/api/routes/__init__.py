"""API Routes module"""
from fastapi import APIRouter

from .forms import router as forms_router
from .workflow import router as workflow_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(forms_router, prefix="/forms", tags=["Forms"])
api_router.include_router(workflow_router, prefix="/workflow", tags=["Workflow"])

__all__ = ["api_router"]
