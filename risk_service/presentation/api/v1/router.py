from fastapi import APIRouter

from .assessments import assessment_router
from .models import model_router

router = APIRouter()

router.include_router(model_router, tags=["Models"])
router.include_router(assessment_router, tags=["Assessments"])
