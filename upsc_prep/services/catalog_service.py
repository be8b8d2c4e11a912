# upsc_prep/services/catalog_service.py
"""
Read-mostly catalogues: video lectures, the study library and pricing.

Each listing falls back to a built-in catalogue while its table is empty so a
fresh install still renders the marketing pages.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..core.dummy_data import (
    DEFAULT_LIBRARY_SUBJECTS, DEFAULT_PRICING_PLANS, DEFAULT_TESTIMONIALS, DEFAULT_VIDEO_STATS,
    DEFAULT_VIDEO_SUBJECTS,
)
from ..core.errors import BadRequestError, NotFoundError
from ..core.models import (
    Chapter, MentorBooking, MentorQuestion, PricingPlan, StudyMaterial, Subject, Testimonial, User,
    Video, VideoSubject,
)
from ..core.utils import ValidationUtils, round_to
from ..models.schemas import BookCallRequest

logger = logging.getLogger(__name__)


class CatalogService:

    # ==================== Videos ====================

    def video_subjects(self, db: Session) -> List[Dict[str, Any]]:
        rows = (
            db.query(VideoSubject, func.count(Video.id))
            .outerjoin(Video, Video.subject_id == VideoSubject.id)
            .group_by(VideoSubject.id)
            .order_by(VideoSubject.order.asc())
            .all()
        )
        if not rows:
            return [dict(subject) for subject in DEFAULT_VIDEO_SUBJECTS]

        return [
            {
                "id": subject.id,
                "name": subject.name,
                "description": subject.description,
                "iconUrl": subject.icon_url,
                "videoCount": count,
            }
            for subject, count in rows
        ]

    def video_stats(self, db: Session) -> Dict[str, Any]:
        lectures = db.query(Video).filter(Video.is_published.is_(True)).count() or DEFAULT_VIDEO_STATS["lectures"]
        subjects = db.query(VideoSubject).count() or DEFAULT_VIDEO_STATS["subjects"]
        return {
            "totalLectures": lectures,
            "totalSubjects": subjects,
            "totalHours": round_to(lectures * DEFAULT_VIDEO_STATS["hours_per_lecture"]),
        }

    def videos_for_subject(self, db: Session, subject_key: str) -> Dict[str, Any]:
        """Published videos of a subject looked up by id or by name"""
        subject = (
            db.query(VideoSubject)
            .filter(or_(VideoSubject.id == subject_key, VideoSubject.name == subject_key))
            .first()
        )
        if subject is None:
            raise NotFoundError("Subject not found")

        videos = (
            db.query(Video)
            .filter(Video.subject_id == subject.id, Video.is_published.is_(True))
            .order_by(Video.order.asc())
            .all()
        )
        return {"subject": subject.to_dict(), "videos": [video.to_dict() for video in videos]}

    def ask_mentor(self, db: Session, user: User, question: str) -> Dict[str, Any]:
        if ValidationUtils.is_blank(question):
            raise BadRequestError("Question is required")

        mentor_question = MentorQuestion(user_id=user.id, question=question.strip())
        db.add(mentor_question)
        db.commit()
        logger.info(f"❓ Mentor question {mentor_question.id} from {user.id}")
        return mentor_question.to_dict()

    # ==================== Library ====================

    def library_subjects(self, db: Session) -> List[Dict[str, Any]]:
        subjects = db.query(Subject).order_by(Subject.order.asc()).all()
        if not subjects:
            return [dict(subject) for subject in DEFAULT_LIBRARY_SUBJECTS]

        material_counts = dict(
            db.query(Chapter.subject_id, func.count(StudyMaterial.id))
            .join(StudyMaterial, StudyMaterial.chapter_id == Chapter.id)
            .group_by(Chapter.subject_id)
            .all()
        )
        return [
            {
                "id": subject.id,
                "name": subject.name,
                "description": subject.description,
                "iconUrl": subject.icon_url,
                "tags": subject.tags,
                "chapterCount": len(subject.chapters),
                "pdfCount": material_counts.get(subject.id, 0),
            }
            for subject in subjects
        ]

    def chapters(self, db: Session, subject_id: str) -> Dict[str, Any]:
        subject = db.get(Subject, subject_id)
        if subject is None:
            raise NotFoundError("Subject not found")

        chapters = []
        for chapter in subject.chapters:
            item = chapter.to_dict()
            item["materials"] = [
                material.to_dict(exclude=("chapter_id", "file_url")) for material in chapter.materials
            ]
            chapters.append(item)

        return {"subject": {"id": subject.id, "name": subject.name}, "chapters": chapters}

    def chapter_downloads(self, db: Session, chapter_id: str) -> List[Dict[str, Any]]:
        materials = db.query(StudyMaterial).filter(StudyMaterial.chapter_id == chapter_id).all()
        if not materials:
            raise NotFoundError("No materials found for this chapter")
        return [material.to_dict(exclude=("chapter_id",)) for material in materials]

    # ==================== Pricing & mentorship ====================

    def plans(self, db: Session) -> List[Dict[str, Any]]:
        plans = (
            db.query(PricingPlan)
            .filter(PricingPlan.is_active.is_(True))
            .order_by(PricingPlan.order.asc())
            .all()
        )
        if not plans:
            return [dict(plan) for plan in DEFAULT_PRICING_PLANS]
        return [plan.to_dict() for plan in plans]

    def testimonials(self, db: Session) -> List[Dict[str, Any]]:
        testimonials = (
            db.query(Testimonial)
            .filter(Testimonial.is_active.is_(True))
            .order_by(Testimonial.order.asc())
            .all()
        )
        if not testimonials:
            return [dict(item) for item in DEFAULT_TESTIMONIALS]
        return [item.to_dict() for item in testimonials]

    def book_call(self, db: Session, user: User, request: BookCallRequest) -> Dict[str, Any]:
        if ValidationUtils.is_blank(request.name) or ValidationUtils.is_blank(request.email):
            raise BadRequestError("Name and email are required")

        booking = MentorBooking(
            user_id=user.id,
            name=request.name.strip(),
            email=request.email.strip(),
            phone=request.phone,
            message=request.message,
        )
        db.add(booking)
        db.commit()
        logger.info(f"📞 Mentor call booked by {user.id}")
        return booking.to_dict()


# Singleton pattern for catalog service
_catalog_service = None


def get_catalog_service() -> CatalogService:
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
