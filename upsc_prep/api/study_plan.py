# upsc_prep/api/study_plan.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.auth import authenticate
from ..core.database import get_db
from ..core.models import User
from ..core.utils import ResponseFormatter
from ..models.schemas import TaskCreateRequest, TaskUpdateRequest
from ..services.study_plan_service import get_study_plan_service

router = APIRouter()
study_plan_service = get_study_plan_service()


@router.get("/today")
def get_today_tasks(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(study_plan_service.today_tasks(db, user))


@router.post("/tasks", status_code=201)
def create_task(body: TaskCreateRequest, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    task = study_plan_service.create_task(db, user, body)
    return JSONResponse(status_code=201, content=ResponseFormatter.success(task))


@router.put("/tasks/{task_id}")
def update_task(task_id: str, body: TaskUpdateRequest, user: User = Depends(authenticate),
                db: Session = Depends(get_db)):
    return ResponseFormatter.success(study_plan_service.update_task(db, user, task_id, body))


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, user: User = Depends(authenticate), db: Session = Depends(get_db)):
    study_plan_service.delete_task(db, user, task_id)
    return ResponseFormatter.success(message="Task deleted")


@router.get("/streak")
def get_study_streak(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(study_plan_service.get_streak(db, user))


@router.get("/weekly-goals")
def get_weekly_goals(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(study_plan_service.weekly_goals(db, user))


@router.get("/syllabus-coverage")
def get_syllabus_coverage(user: User = Depends(authenticate), db: Session = Depends(get_db)):
    return ResponseFormatter.success(study_plan_service.syllabus_coverage(db))
