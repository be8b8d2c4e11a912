# upsc_prep/services/content_seed.py
import logging
from datetime import date
from typing import Dict

from sqlalchemy.orm import Session

from ..core.dummy_data import SAMPLE_EDITORIALS, SAMPLE_MAINS_QUESTION, SAMPLE_MCQ_QUESTIONS
from ..core.models import DailyMCQ, DailyMainsQuestion, Editorial, MCQQuestion
from ..core.utils import DateTimeUtils

logger = logging.getLogger(__name__)

MARKS_PER_MCQ = 2


def seed_daily_content(db: Session, day: date = None) -> Dict[str, int]:
    """Write sample MCQs, a mains question and editorials for ``day`` where missing"""
    day = day or DateTimeUtils.today()
    created = {"mcq": 0, "mains": 0, "editorials": 0}

    if db.query(DailyMCQ).filter(DailyMCQ.date == day).first() is None:
        mcq = DailyMCQ(
            date=day,
            title=f"Daily MCQ Challenge - {day.strftime('%d %b %Y')}",
            topic="Mixed GS",
            tags=sorted({question["category"] for question in SAMPLE_MCQ_QUESTIONS}),
            question_count=len(SAMPLE_MCQ_QUESTIONS),
            time_limit=15,
            total_marks=len(SAMPLE_MCQ_QUESTIONS) * MARKS_PER_MCQ,
        )
        for number, sample in enumerate(SAMPLE_MCQ_QUESTIONS, start=1):
            mcq.questions.append(MCQQuestion(question_num=number, **sample))
        db.add(mcq)
        created["mcq"] = 1

    if db.query(DailyMainsQuestion).filter(DailyMainsQuestion.date == day).first() is None:
        db.add(DailyMainsQuestion(date=day, **SAMPLE_MAINS_QUESTION))
        created["mains"] = 1

    start, end = DateTimeUtils.day_bounds(day)
    has_editorials = (
        db.query(Editorial)
        .filter(Editorial.published_at >= start, Editorial.published_at < end)
        .first()
    )
    if has_editorials is None:
        for sample in SAMPLE_EDITORIALS:
            db.add(Editorial(published_at=DateTimeUtils.now(), **sample))
        created["editorials"] = len(SAMPLE_EDITORIALS)

    db.commit()
    logger.info(f"🌱 Sample content for {day.isoformat()}: {created}")
    return created
