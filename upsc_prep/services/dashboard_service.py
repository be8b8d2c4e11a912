# upsc_prep/services/dashboard_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.config import config
from ..core.models import MainsAttempt, MCQAttempt, MockTestAttempt, StudyPlanTask, User
from ..core.utils import DateTimeUtils, ValidationUtils, percentage, round_to
from .progress_service import EMPTY_WEEK, get_progress_service

logger = logging.getLogger(__name__)


def rank_topics(attempts: List[MCQAttempt]) -> List[Dict[str, Any]]:
    """Topics ordered by how often they were strong across ``attempts``"""
    tallies: Dict[str, Dict[str, int]] = {}
    for attempt in attempts:
        for topic in attempt.strong_topics or []:
            tally = tallies.setdefault(topic, {"correct": 0, "total": 0})
            tally["correct"] += 1
            tally["total"] += 1
        for topic in attempt.weak_topics or []:
            tallies.setdefault(topic, {"correct": 0, "total": 0})["total"] += 1

    ranked = [
        {"name": name, "accuracy": percentage(tally["correct"], tally["total"])}
        for name, tally in tallies.items()
    ]
    # stable sort keeps first-seen order among equal accuracies
    ranked.sort(key=lambda topic: topic["accuracy"], reverse=True)
    return ranked


class DashboardService:
    """Per-user overview: tasks, activity, streaks and performance"""

    def __init__(self):
        self.progress = get_progress_service()

    def dashboard(self, db: Session, user: User) -> Dict[str, Any]:
        today_tasks = (
            db.query(StudyPlanTask)
            .filter(
                StudyPlanTask.user_id == user.id,
                StudyPlanTask.date == DateTimeUtils.today(),
                StudyPlanTask.is_completed.is_(False),
            )
            .count()
        )
        activity = self.progress.recent_activity(db, user.id, config.DASHBOARD_ACTIVITY_COUNT)
        streak = self.progress.get_user_streak(db, user.id)

        return {
            "todayTasksCount": today_tasks,
            "recentActivity": [item.to_dict() for item in activity],
            "streak": streak.to_dict() if streak else {
                "currentStreak": 0,
                "longestStreak": 0,
                "weekActivity": list(EMPTY_WEEK),
            },
        }

    def streak(self, db: Session, user: User) -> Dict[str, Any]:
        return self.progress.get_or_create_user_streak(db, user.id).to_dict()

    def activity(self, db: Session, user: User, limit: Any = None) -> List[Dict[str, Any]]:
        limit = ValidationUtils.parse_positive_int(limit, config.ACTIVITY_DEFAULT_LIMIT)
        return [item.to_dict() for item in self.progress.recent_activity(db, user.id, limit)]

    def performance(self, db: Session, user: User) -> Dict[str, Any]:
        history = config.PERFORMANCE_HISTORY

        mcq_attempts = (
            db.query(MCQAttempt).filter(MCQAttempt.user_id == user.id)
            .order_by(MCQAttempt.created_at.desc()).limit(history).all()
        )
        mains_attempts = (
            db.query(MainsAttempt).filter(MainsAttempt.user_id == user.id)
            .order_by(MainsAttempt.created_at.desc()).limit(history).all()
        )
        mock_attempts = (
            db.query(MockTestAttempt).filter(MockTestAttempt.user_id == user.id)
            .order_by(MockTestAttempt.created_at.desc()).limit(history).all()
        )
        streak = self.progress.get_user_streak(db, user.id)

        total_mcq = len(mcq_attempts)
        avg_accuracy = sum(a.accuracy for a in mcq_attempts) / total_mcq if total_mcq else 0
        avg_time = sum(a.time_taken for a in mcq_attempts) / total_mcq if total_mcq else 0
        best_percentile = max((a.percentile for a in mcq_attempts if a.percentile), default=0)

        mains_scores = [a.evaluation.score for a in mains_attempts if a.evaluation is not None]
        avg_mains = sum(mains_scores) / len(mains_scores) if mains_scores else 0

        ranked = rank_topics(mcq_attempts)

        return {
            "mcq": {
                "totalAttempts": total_mcq,
                "avgAccuracy": round_to(avg_accuracy, 1),
                "avgTimePerQuestion": round_to(avg_time),
                "bestPercentile": best_percentile,
            },
            "mains": {"totalAttempts": len(mains_attempts), "avgScore": round_to(avg_mains, 1)},
            "mockTests": {"totalAttempts": len(mock_attempts)},
            "streak": streak.to_dict() if streak else {"currentStreak": 0, "longestStreak": 0},
            "strongTopics": ranked[:5],
            "weakTopics": list(reversed(ranked[-5:])),
        }

    def practice_stats(self, db: Session, user: User) -> Dict[str, Any]:
        start, _ = DateTimeUtils.day_bounds(DateTimeUtils.today())
        today_count = (
            db.query(MockTestAttempt)
            .filter(MockTestAttempt.user_id == user.id, MockTestAttempt.completed_at >= start)
            .count()
        )
        streak = self.progress.get_user_streak(db, user.id)
        return {"todayCount": today_count, "streak": streak.current_streak if streak else 0}


# Singleton pattern for dashboard service
_dashboard_service = None


def get_dashboard_service() -> DashboardService:
    global _dashboard_service
    if _dashboard_service is None:
        _dashboard_service = DashboardService()
    return _dashboard_service
