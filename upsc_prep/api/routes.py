# upsc_prep/api/routes.py
import time

from fastapi import APIRouter

from ..core.utils import DateTimeUtils, ResponseFormatter
from . import (
    auth, daily_answer, daily_mcq, dashboard, editorials, library, mock_tests, pricing, study_plan,
    videos,
)

START_TIME = time.time()

router = APIRouter(prefix="/api")


@router.get("/")
async def home():
    """Service banner"""
    response = ResponseFormatter.success(message="UPSC Backend API is running")
    response["timestamp"] = DateTimeUtils.now().isoformat()
    return response


@router.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "uptime": round(time.time() - START_TIME, 3),
        "timestamp": DateTimeUtils.now().isoformat(),
    }


router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(dashboard.router, prefix="/user", tags=["dashboard"])
router.include_router(daily_mcq.router, prefix="/daily-mcq", tags=["daily-mcq"])
router.include_router(daily_answer.router, prefix="/daily-answer", tags=["daily-answer"])
router.include_router(editorials.router, prefix="/editorials", tags=["editorials"])
router.include_router(mock_tests.router, prefix="/mock-tests", tags=["mock-tests"])
router.include_router(study_plan.router, prefix="/study-plan", tags=["study-plan"])
router.include_router(videos.router, prefix="/videos", tags=["videos"])
router.include_router(library.router, prefix="/library", tags=["library"])
router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
router.include_router(pricing.router, prefix="/mentorship", tags=["mentorship"])
