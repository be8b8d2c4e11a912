# upsc_prep/api/editorials.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import authenticate, optional_auth
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..services.editorial_service import get_editorial_service

router = APIRouter()
editorial_service = get_editorial_service()


@router.get("/today")
def get_today_editorials(source: Optional[str] = None, user: Optional[User] = Depends(optional_auth),
                         db: Session = Depends(get_db)):
    return ResponseFormatter.success(editorial_service.list_today(db, user, source))


# /stats must be registered before /{editorial_id}
@router.get("/stats")
def get_stats(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(editorial_service.get_stats(db, user))


@router.get("/{editorial_id}")
def get_editorial(editorial_id: str, db: Session = Depends(get_db)):
    return ResponseFormatter.success(editorial_service.get_editorial(db, editorial_id))


@router.post("/{editorial_id}/mark-read")
def mark_read(editorial_id: str, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    editorial_service.mark_read(db, user, editorial_id)
    return ResponseFormatter.success(message="Marked as read")


@router.post("/{editorial_id}/save")
def toggle_save(editorial_id: str, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    saved = editorial_service.toggle_save(db, user, editorial_id)
    return ResponseFormatter.success({"saved": saved})


@router.post("/{editorial_id}/summarize")
def summarize(editorial_id: str, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success({"summary": editorial_service.summarize(db, editorial_id)})
