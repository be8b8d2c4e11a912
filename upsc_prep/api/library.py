# upsc_prep/api/library.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import authenticate
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..services.catalog_service import get_catalog_service

router = APIRouter()
catalog_service = get_catalog_service()


@router.get("/subjects")
def get_subjects(db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.library_subjects(db))


@router.get("/subjects/{subject_id}/chapters")
def get_chapters(subject_id: str, db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.chapters(db, subject_id))


@router.get("/download/{chapter_id}")
def get_download_url(chapter_id: str, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.chapter_downloads(db, chapter_id))
