# upsc_prep/api/videos.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.auth import authenticate
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..models.schemas import MentorQuestionRequest
from ..services.catalog_service import get_catalog_service

router = APIRouter()
catalog_service = get_catalog_service()


@router.get("/subjects")
def get_subjects(db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.video_subjects(db))


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.video_stats(db))


@router.get("/{subject}")
def get_videos_by_subject(subject: str, db: Session = Depends(get_db)):
    """Videos for a subject given its id or name"""
    return ResponseFormatter.success(catalog_service.videos_for_subject(db, subject))


@router.post("/mentor/ask", status_code=201)
def ask_mentor(body: MentorQuestionRequest, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    question = catalog_service.ask_mentor(db, user, body.question)
    return JSONResponse(status_code=201, content=ResponseFormatter.success(question))
