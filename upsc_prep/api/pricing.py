# upsc_prep/api/pricing.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.auth import authenticate
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..models.schemas import BookCallRequest
from ..services.catalog_service import get_catalog_service

# Mounted at both /pricing and /mentorship
router = APIRouter()
catalog_service = get_catalog_service()


@router.get("/plans")
def get_plans(db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.plans(db))


@router.post("/book-call", status_code=201)
def book_call(body: BookCallRequest, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    booking = catalog_service.book_call(db, user, body)
    return JSONResponse(
        status_code=201,
        content=ResponseFormatter.success(booking, "Call booked successfully! We'll reach out within 24 hours."),
    )


@router.get("/testimonials")
def get_testimonials(db: Session = Depends(get_db)):
    return ResponseFormatter.success(catalog_service.testimonials(db))
