# upsc_prep/api/dashboard.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import authenticate
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..services.dashboard_service import get_dashboard_service

router = APIRouter()
dashboard_service = get_dashboard_service()


@router.get("/dashboard")
def get_dashboard(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(dashboard_service.dashboard(db, user))


@router.get("/streak")
def get_streak(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(dashboard_service.streak(db, user))


@router.get("/activity")
def get_activity(limit: Optional[str] = None, user: User = Depends(authenticate),
                 db: Session = Depends(get_db)):
    return ResponseFormatter.success(dashboard_service.activity(db, user, limit))


@router.get("/performance")
def get_performance(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(dashboard_service.performance(db, user))


@router.get("/practice-stats")
def get_practice_stats(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(dashboard_service.practice_stats(db, user))
