# upsc_prep/services/progress_service.py
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.models import StudyStreak, UserActivity, UserStreak
from ..core.utils import DateTimeUtils

logger = logging.getLogger(__name__)

EMPTY_WEEK = [False] * 7


def week_activity_for(day: date, previous: Optional[List[bool]] = None,
                      last_active: Optional[date] = None) -> List[bool]:
    """Monday-first activity flags for the week of ``day``.

    Flags from ``previous`` survive only when ``last_active`` falls in the same week.
    """
    same_week = (
        previous is not None
        and last_active is not None
        and DateTimeUtils.week_start(last_active) == DateTimeUtils.week_start(day)
    )
    activity = list(previous) if same_week and len(previous) == 7 else list(EMPTY_WEEK)
    activity[day.weekday()] = True
    return activity


def next_streak(current: int, last_day: Optional[date], today: date) -> Optional[int]:
    """New streak length for activity on ``today``; None when today is already counted"""
    if last_day == today:
        return None
    if last_day == today - timedelta(days=1):
        return current + 1
    return 1


class ProgressService:
    """Activity feed and the two streak counters"""

    def log_activity(self, db: Session, user_id: str, type_: str, title: str,
                     description: Optional[str] = None,
                     metadata: Optional[Dict[str, Any]] = None) -> UserActivity:
        activity = UserActivity(user_id=user_id, type=type_, title=title,
                                description=description, meta=metadata)
        db.add(activity)
        return activity

    def recent_activity(self, db: Session, user_id: str, limit: int) -> List[UserActivity]:
        return (
            db.query(UserActivity)
            .filter(UserActivity.user_id == user_id)
            .order_by(UserActivity.created_at.desc())
            .limit(limit)
            .all()
        )

    # ---------- activity streak ----------

    def get_user_streak(self, db: Session, user_id: str) -> Optional[UserStreak]:
        return db.query(UserStreak).filter(UserStreak.user_id == user_id).first()

    def get_or_create_user_streak(self, db: Session, user_id: str) -> UserStreak:
        streak = self.get_user_streak(db, user_id)
        if streak is None:
            streak = UserStreak(user_id=user_id, current_streak=0, longest_streak=0,
                                week_activity=list(EMPTY_WEEK))
            db.add(streak)
            db.commit()
        return streak

    def record_activity_day(self, db: Session, user_id: str, today: Optional[date] = None) -> UserStreak:
        """Advance the user's activity streak for ``today``"""
        today = today or DateTimeUtils.today()
        streak = self.get_user_streak(db, user_id)

        if streak is None:
            streak = UserStreak(user_id=user_id, current_streak=1, longest_streak=1,
                                last_active_date=today, week_activity=week_activity_for(today))
            db.add(streak)
            return streak

        new_streak = next_streak(streak.current_streak, streak.last_active_date, today)
        if new_streak is None:
            return streak

        # JSON columns are not mutation-tracked; always assign a new list
        streak.week_activity = week_activity_for(today, streak.week_activity, streak.last_active_date)
        streak.current_streak = new_streak
        streak.longest_streak = max(new_streak, streak.longest_streak)
        streak.last_active_date = today
        logger.debug(f"User {user_id} streak -> {new_streak}")
        return streak

    # ---------- study streak ----------

    def get_or_create_study_streak(self, db: Session, user_id: str) -> StudyStreak:
        streak = db.query(StudyStreak).filter(StudyStreak.user_id == user_id).first()
        if streak is None:
            streak = StudyStreak(user_id=user_id, current_streak=0, longest_streak=0, total_study_days=0)
            db.add(streak)
            db.commit()
        return streak

    def record_study_day(self, db: Session, user_id: str, today: Optional[date] = None) -> StudyStreak:
        """Advance the study streak when a planner task is completed"""
        today = today or DateTimeUtils.today()
        streak = db.query(StudyStreak).filter(StudyStreak.user_id == user_id).first()

        if streak is None:
            streak = StudyStreak(user_id=user_id, current_streak=1, longest_streak=1,
                                 total_study_days=1, last_study_date=today)
            db.add(streak)
            return streak

        new_streak = next_streak(streak.current_streak, streak.last_study_date, today)
        if new_streak is None:
            return streak

        streak.current_streak = new_streak
        streak.longest_streak = max(new_streak, streak.longest_streak)
        streak.total_study_days += 1
        streak.last_study_date = today
        return streak


# Singleton pattern for progress service
_progress_service = None


def get_progress_service() -> ProgressService:
    global _progress_service
    if _progress_service is None:
        _progress_service = ProgressService()
    return _progress_service
