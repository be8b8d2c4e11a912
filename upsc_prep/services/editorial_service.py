# upsc_prep/services/editorial_service.py
import logging
from typing import Any, Dict, List, Optional

import markdown
from sqlalchemy.orm import Session

from ..core.ai_services import get_ai_service
from ..core.config import config
from ..core.errors import NotFoundError
from ..core.models import Editorial, EditorialBookmark, EditorialProgress, User
from ..core.utils import DateTimeUtils
from .progress_service import get_progress_service

logger = logging.getLogger(__name__)


class EditorialService:
    """Daily editorials with per-user read and bookmark state"""

    def __init__(self):
        self.progress = get_progress_service()

    def _get(self, db: Session, editorial_id: str) -> Editorial:
        editorial = db.get(Editorial, editorial_id)
        if editorial is None:
            raise NotFoundError("Editorial not found")
        return editorial

    def list_today(self, db: Session, user: Optional[User], source: Optional[str] = None) -> List[Dict[str, Any]]:
        start, end = DateTimeUtils.day_bounds(DateTimeUtils.today())
        query = db.query(Editorial).filter(Editorial.published_at >= start, Editorial.published_at < end)
        if source and source != "all":
            query = query.filter(Editorial.source == source)
        editorials = query.order_by(Editorial.published_at.desc()).all()

        read_ids, saved_ids = set(), set()
        if user is not None and editorials:
            ids = [editorial.id for editorial in editorials]
            read_ids = {
                row.editorial_id for row in db.query(EditorialProgress).filter(
                    EditorialProgress.user_id == user.id,
                    EditorialProgress.editorial_id.in_(ids),
                    EditorialProgress.is_read.is_(True),
                )
            }
            saved_ids = {
                row.editorial_id for row in db.query(EditorialBookmark).filter(
                    EditorialBookmark.user_id == user.id,
                    EditorialBookmark.editorial_id.in_(ids),
                )
            }

        data = []
        for editorial in editorials:
            item = editorial.to_dict()
            item["isRead"] = editorial.id in read_ids
            item["isSaved"] = editorial.id in saved_ids
            data.append(item)
        return data

    def get_editorial(self, db: Session, editorial_id: str) -> Dict[str, Any]:
        editorial = self._get(db, editorial_id)
        data = editorial.to_dict()
        data["contentHtml"] = markdown.markdown(editorial.content or "")
        return data

    def mark_read(self, db: Session, user: User, editorial_id: str):
        editorial = self._get(db, editorial_id)
        progress = (
            db.query(EditorialProgress)
            .filter(EditorialProgress.user_id == user.id, EditorialProgress.editorial_id == editorial.id)
            .first()
        )
        if progress is None:
            progress = EditorialProgress(user_id=user.id, editorial_id=editorial.id)
            db.add(progress)
        progress.is_read = True
        progress.read_at = DateTimeUtils.now()

        self.progress.log_activity(db, user.id, "editorial", "Read Editorial",
                                   metadata={"editorialId": editorial.id})
        db.commit()

    def toggle_save(self, db: Session, user: User, editorial_id: str) -> bool:
        """Flip the bookmark; returns the new saved state"""
        editorial = self._get(db, editorial_id)
        bookmark = (
            db.query(EditorialBookmark)
            .filter(EditorialBookmark.user_id == user.id, EditorialBookmark.editorial_id == editorial.id)
            .first()
        )
        if bookmark is not None:
            db.delete(bookmark)
            saved = False
        else:
            db.add(EditorialBookmark(user_id=user.id, editorial_id=editorial.id))
            saved = True
        db.commit()
        return saved

    def summarize(self, db: Session, editorial_id: str) -> str:
        editorial = self._get(db, editorial_id)
        if editorial.ai_summary:
            return editorial.ai_summary

        summary = get_ai_service().summarize_editorial(editorial.title, editorial.category, editorial.content)
        editorial.ai_summary = summary
        db.commit()
        logger.info(f"📝 Summary stored for editorial {editorial.id}")
        return summary

    def get_stats(self, db: Session, user: User) -> Dict[str, Any]:
        total_read = (
            db.query(EditorialProgress)
            .filter(EditorialProgress.user_id == user.id, EditorialProgress.is_read.is_(True))
            .count()
        )
        total_saved = db.query(EditorialBookmark).filter(EditorialBookmark.user_id == user.id).count()

        week_start, _ = DateTimeUtils.day_bounds(DateTimeUtils.week_start())
        weekly_read = (
            db.query(EditorialProgress)
            .filter(
                EditorialProgress.user_id == user.id,
                EditorialProgress.is_read.is_(True),
                EditorialProgress.read_at >= week_start,
            )
            .count()
        )

        streak = self.progress.get_user_streak(db, user.id)
        return {
            "totalRead": total_read,
            "totalSaved": total_saved,
            "weeklyRead": weekly_read,
            "weeklyTarget": config.WEEKLY_EDITORIAL_TARGET,
            "streak": streak.current_streak if streak else 0,
        }


# Singleton pattern for editorial service
_editorial_service = None


def get_editorial_service() -> EditorialService:
    global _editorial_service
    if _editorial_service is None:
        _editorial_service = EditorialService()
    return _editorial_service
