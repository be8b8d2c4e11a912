# upsc_prep/services/answer_service.py
import logging
import threading
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.ai_services import get_ai_service
from ..core.config import config
from ..core.database import get_db_manager
from ..core.errors import BadRequestError, NotFoundError
from ..core.models import DailyMainsQuestion, MainsAttempt, MainsEvaluation, User
from ..core.utils import DateTimeUtils, ValidationUtils
from .progress_service import get_progress_service

logger = logging.getLogger(__name__)


class EvaluationScheduler:
    """Runs one delayed evaluation per submission on a daemon timer"""

    def __init__(self, delay_seconds: float = None):
        self.delay_seconds = config.EVALUATION_DELAY_SECONDS if delay_seconds is None else delay_seconds

    def schedule(self, evaluation_id: str, question: Dict[str, Any], answer_text: Optional[str]):
        if self.delay_seconds <= 0:
            self.run(evaluation_id, question, answer_text)
            return

        timer = threading.Timer(self.delay_seconds, self.run, args=(evaluation_id, question, answer_text))
        timer.daemon = True
        timer.start()
        logger.debug(f"Evaluation {evaluation_id} scheduled in {self.delay_seconds}s")

    def run(self, evaluation_id: str, question: Dict[str, Any], answer_text: Optional[str]):
        """Grade the answer and persist the result in a fresh session"""
        try:
            result = get_ai_service().evaluate_answer(question, answer_text)
            with get_db_manager().session_scope() as session:
                evaluation = session.get(MainsEvaluation, evaluation_id)
                if evaluation is None:
                    logger.warning(f"Evaluation {evaluation_id} vanished before completion")
                    return
                evaluation.score = result["score"]
                evaluation.strengths = result["strengths"]
                evaluation.improvements = result["improvements"]
                evaluation.suggestions = result["suggestions"]
                evaluation.detailed_feedback = result["detailed_feedback"]
                evaluation.status = "completed"
                evaluation.evaluated_at = DateTimeUtils.now()
            logger.info(f"✅ Evaluation {evaluation_id} completed")
        except Exception as e:
            logger.error(f"❌ Evaluation {evaluation_id} failed: {e}", exc_info=True)
            self._mark_failed(evaluation_id)

    def _mark_failed(self, evaluation_id: str):
        try:
            with get_db_manager().session_scope() as session:
                evaluation = session.get(MainsEvaluation, evaluation_id)
                if evaluation is not None:
                    evaluation.status = "failed"
        except Exception as e:
            logger.error(f"❌ Could not mark evaluation {evaluation_id} as failed: {e}")


class AnswerService:
    """Daily mains question, answer submissions and their evaluation"""

    def __init__(self, scheduler: EvaluationScheduler = None):
        self.progress = get_progress_service()
        self.scheduler = scheduler or EvaluationScheduler()

    def _today_question(self, db: Session, message: str = "No mains question for today") -> DailyMainsQuestion:
        question = (
            db.query(DailyMainsQuestion)
            .filter(DailyMainsQuestion.date == DateTimeUtils.today())
            .first()
        )
        if question is None:
            raise NotFoundError(message)
        return question

    def _attempt(self, db: Session, user_id: str, question_id: str) -> Optional[MainsAttempt]:
        return (
            db.query(MainsAttempt)
            .filter(MainsAttempt.user_id == user_id, MainsAttempt.question_id == question_id)
            .first()
        )

    def _attempt_count(self, db: Session, question_id: str) -> int:
        return db.query(MainsAttempt).filter(MainsAttempt.question_id == question_id).count()

    def get_today(self, db: Session, user: Optional[User]) -> Dict[str, Any]:
        question = self._today_question(db, "No mains question available for today")
        attempted = False
        if user is not None:
            attempt = self._attempt(db, user.id, question.id)
            attempted = bool(attempt and attempt.submitted_at)

        data = question.to_dict(exclude=("date", "question_text", "instructions", "created_at"))
        data["attempted"] = attempted
        data["attemptCount"] = self._attempt_count(db, question.id)
        return data

    def get_question(self, db: Session) -> Dict[str, Any]:
        question = self._today_question(db)
        data = question.to_dict()
        data["attemptCount"] = self._attempt_count(db, question.id)
        return data

    def submit_text(self, db: Session, user: User, answer_text: Optional[str]) -> Dict[str, Any]:
        if ValidationUtils.is_blank(answer_text):
            raise BadRequestError("Answer text is required")

        question = self._today_question(db)
        word_count = ValidationUtils.count_words(answer_text)
        attempt = self._upsert_attempt(db, user, question, answer_text=answer_text, word_count=word_count)

        self.progress.log_activity(db, user.id, "answer", "Submitted Daily Answer",
                                   f"{question.subject} - {word_count} words")
        return self._start_evaluation(db, attempt, question, answer_text)

    def submit_upload(self, db: Session, user: User, file_url: Optional[str]) -> Dict[str, Any]:
        if ValidationUtils.is_blank(file_url):
            raise BadRequestError("File URL is required")

        question = self._today_question(db)
        attempt = self._upsert_attempt(db, user, question, file_url=file_url.strip())

        self.progress.log_activity(db, user.id, "answer", "Uploaded Daily Answer", question.subject)
        return self._start_evaluation(db, attempt, question, None)

    def _upsert_attempt(self, db: Session, user: User, question: DailyMainsQuestion, **fields) -> MainsAttempt:
        attempt = self._attempt(db, user.id, question.id)
        if attempt is None:
            attempt = MainsAttempt(user_id=user.id, question_id=question.id)
            db.add(attempt)
        for key, value in fields.items():
            setattr(attempt, key, value)
        attempt.submitted_at = DateTimeUtils.now()
        db.flush()
        return attempt

    def _start_evaluation(self, db: Session, attempt: MainsAttempt, question: DailyMainsQuestion,
                          answer_text: Optional[str]) -> Dict[str, Any]:
        evaluation = db.query(MainsEvaluation).filter(MainsEvaluation.attempt_id == attempt.id).first()
        if evaluation is None:
            evaluation = MainsEvaluation(attempt_id=attempt.id, score=0, strengths=[],
                                         improvements=[], suggestions=[])
            db.add(evaluation)
        evaluation.max_score = question.marks
        evaluation.status = "evaluating"
        db.commit()

        # The callback runs outside this request; hand it plain values
        snapshot = {
            "question_text": question.question_text,
            "paper": question.paper,
            "subject": question.subject,
            "marks": question.marks,
            "word_limit": question.word_limit,
        }
        self.scheduler.schedule(evaluation.id, snapshot, answer_text)

        return {"attemptId": attempt.id, "status": "evaluating"}

    def get_evaluation_status(self, db: Session, user: User) -> Dict[str, Any]:
        question = self._today_question(db)
        attempt = self._attempt(db, user.id, question.id)
        if attempt is None:
            raise NotFoundError("No attempt found")

        status = attempt.evaluation.status if attempt.evaluation else "pending"
        return {
            "attemptId": attempt.id,
            "evaluationStatus": status,
            "isComplete": status == "completed",
        }

    def get_results(self, db: Session, user: User) -> Dict[str, Any]:
        question = self._today_question(db)
        attempt = self._attempt(db, user.id, question.id)
        if attempt is None or attempt.evaluation is None:
            raise NotFoundError("No evaluation results found")

        evaluation = attempt.evaluation
        return {
            "score": evaluation.score,
            "maxScore": evaluation.max_score,
            "strengths": evaluation.strengths,
            "improvements": evaluation.improvements,
            "suggestions": evaluation.suggestions,
            "detailedFeedback": evaluation.detailed_feedback,
            "wordCount": attempt.word_count,
            "submittedAt": DateTimeUtils.isoformat(attempt.submitted_at),
            "status": evaluation.status,
        }


# Singleton pattern for answer service
_answer_service = None


def get_answer_service() -> AnswerService:
    global _answer_service
    if _answer_service is None:
        _answer_service = AnswerService()
    return _answer_service
