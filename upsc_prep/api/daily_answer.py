# upsc_prep/api/daily_answer.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import authenticate, optional_auth
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..models.schemas import TextAnswerRequest, UploadAnswerRequest
from ..services.answer_service import get_answer_service

router = APIRouter()
answer_service = get_answer_service()


@router.get("/today")
def get_today_question(user: Optional[User] = Depends(optional_auth), db: Session = Depends(get_db)):
    return ResponseFormatter.success(answer_service.get_today(db, user))


@router.get("/today/question")
def get_today_full_question(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(answer_service.get_question(db))


@router.post("/today/submit-text")
def submit_text_answer(body: TextAnswerRequest, user: User = Depends(authenticate),
                       db: Session = Depends(get_db)):
    """Typed answer; evaluation starts in the background"""
    return ResponseFormatter.success(answer_service.submit_text(db, user, body.answer_text))


@router.post("/today/upload")
def upload_answer(body: UploadAnswerRequest, user: User = Depends(authenticate),
                  db: Session = Depends(get_db)):
    return ResponseFormatter.success(answer_service.submit_upload(db, user, body.file_url))


@router.get("/today/evaluation-status")
def get_evaluation_status(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(answer_service.get_evaluation_status(db, user))


@router.get("/today/results")
def get_today_results(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(answer_service.get_results(db, user))
