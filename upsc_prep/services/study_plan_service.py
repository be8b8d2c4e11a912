# upsc_prep/services/study_plan_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.dummy_data import DEFAULT_SYLLABUS_COVERAGE, DEFAULT_WEEKLY_GOALS
from ..core.errors import BadRequestError, NotFoundError
from ..core.models import StudyPlanTask, SyllabusCoverage, User, WeeklyGoal
from ..core.utils import DateTimeUtils, ValidationUtils, round_to
from ..models.schemas import TaskCreateRequest, TaskUpdateRequest
from .progress_service import get_progress_service

logger = logging.getLogger(__name__)


def _task_order(task: StudyPlanTask):
    # incomplete first, then by start time with untimed tasks last, then creation
    return (task.is_completed, task.start_time is None, task.start_time or "", task.created_at)


class StudyPlanService:
    """Planner tasks, study streak, weekly goals and syllabus coverage"""

    def __init__(self):
        self.progress = get_progress_service()

    def today_tasks(self, db: Session, user: User) -> List[Dict[str, Any]]:
        tasks = (
            db.query(StudyPlanTask)
            .filter(StudyPlanTask.user_id == user.id, StudyPlanTask.date == DateTimeUtils.today())
            .all()
        )
        return [task.to_dict() for task in sorted(tasks, key=_task_order)]

    def create_task(self, db: Session, user: User, request: TaskCreateRequest) -> Dict[str, Any]:
        if ValidationUtils.is_blank(request.title):
            raise BadRequestError("Title is required")

        task = StudyPlanTask(
            user_id=user.id,
            title=request.title.strip(),
            description=request.description,
            subject=request.subject,
            type=request.type or "study",
            date=DateTimeUtils.to_date(request.date) if request.date else DateTimeUtils.today(),
            start_time=request.start_time,
            end_time=request.end_time,
            duration=request.duration,
        )
        db.add(task)
        db.commit()
        logger.info(f"📌 Task {task.id} created for {user.id}")
        return task.to_dict()

    def _own_task(self, db: Session, user: User, task_id: str) -> StudyPlanTask:
        task = (
            db.query(StudyPlanTask)
            .filter(StudyPlanTask.id == task_id, StudyPlanTask.user_id == user.id)
            .first()
        )
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def update_task(self, db: Session, user: User, task_id: str, request: TaskUpdateRequest) -> Dict[str, Any]:
        task = self._own_task(db, user, task_id)
        changes = request.model_dump(exclude_unset=True)

        is_completed = changes.pop("is_completed", None)
        if "title" in changes:
            if ValidationUtils.is_blank(changes["title"]):
                raise BadRequestError("Title is required")
            changes["title"] = changes["title"].strip()
        if "type" in changes:
            changes["type"] = changes["type"] or "study"
        if "date" in changes:
            changes["date"] = DateTimeUtils.to_date(changes["date"]) if changes["date"] else task.date
        for key, value in changes.items():
            setattr(task, key, value)

        if is_completed is not None:
            task.is_completed = is_completed
            task.completed_at = DateTimeUtils.now() if is_completed else None
            if is_completed:
                self.progress.record_study_day(db, user.id)

        db.commit()
        return task.to_dict()

    def delete_task(self, db: Session, user: User, task_id: str):
        task = self._own_task(db, user, task_id)
        db.delete(task)
        db.commit()

    def get_streak(self, db: Session, user: User) -> Dict[str, Any]:
        return self.progress.get_or_create_study_streak(db, user.id).to_dict()

    def weekly_goals(self, db: Session, user: User) -> List[Dict[str, Any]]:
        week_start = DateTimeUtils.week_start()
        query = (
            db.query(WeeklyGoal)
            .filter(WeeklyGoal.user_id == user.id, WeeklyGoal.week_start == week_start)
            .order_by(WeeklyGoal.created_at.asc())
        )
        goals = query.all()

        if not goals:
            for goal in DEFAULT_WEEKLY_GOALS:
                db.add(WeeklyGoal(user_id=user.id, title=goal["title"], target_count=goal["target_count"],
                                  current_count=0, week_start=week_start))
            db.commit()
            goals = query.all()

        return [goal.to_dict() for goal in goals]

    def syllabus_coverage(self, db: Session) -> List[Dict[str, Any]]:
        coverage = db.query(SyllabusCoverage).order_by(SyllabusCoverage.subject.asc()).all()
        if not coverage:
            return [
                {
                    "subject": item["subject"],
                    "totalTopics": item["totalTopics"],
                    "percentage": round_to(item["covered"] / item["totalTopics"] * 100),
                }
                for item in DEFAULT_SYLLABUS_COVERAGE
            ]

        data = []
        for item in coverage:
            row = item.to_dict()
            row["percentage"] = item.percentage
            data.append(row)
        return data


# Singleton pattern for study plan service
_study_plan_service = None


def get_study_plan_service() -> StudyPlanService:
    global _study_plan_service
    if _study_plan_service is None:
        _study_plan_service = StudyPlanService()
    return _study_plan_service
