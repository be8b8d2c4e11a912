# upsc_prep/api/daily_mcq.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import authenticate, optional_auth
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..models.schemas import MCQSubmitRequest
from ..services.mcq_service import get_mcq_service

router = APIRouter()
mcq_service = get_mcq_service()


@router.get("/today")
def get_today_mcq(user: Optional[User] = Depends(optional_auth), db: Session = Depends(get_db)):
    """Today's MCQ metadata with the caller's attempted flag"""
    return ResponseFormatter.success(mcq_service.get_today(db, user))


@router.get("/today/questions")
def get_today_questions(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(mcq_service.get_questions(db))


@router.post("/today/submit")
def submit_mcq(body: MCQSubmitRequest, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(mcq_service.submit(db, user, body))


@router.get("/today/results")
def get_today_results(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(mcq_service.get_results(db, user))


@router.get("/today/review")
def get_today_review(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(mcq_service.get_review(db, user))


@router.get("/today/recommendations")
def get_today_recommendations(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(mcq_service.get_recommendations(db, user))
