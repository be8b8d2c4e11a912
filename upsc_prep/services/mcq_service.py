# upsc_prep/services/mcq_service.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import config
from ..core.errors import BadRequestError, NotFoundError
from ..core.models import DailyMCQ, MCQAttempt, MCQResponse, User, to_camel
from ..core.utils import DateTimeUtils, ResponseFormatter, percentage, round_to, split_topics
from ..models.schemas import MCQSubmitRequest
from .progress_service import get_progress_service

logger = logging.getLogger(__name__)

QUESTION_FIELDS = ("id", "question_num", "question_text", "category", "difficulty", "options")


class MCQService:
    """Today's MCQ set: delivery, scoring, ranking and review"""

    def __init__(self):
        self.progress = get_progress_service()

    def _today_mcq(self, db: Session, message: str = "No MCQ challenge available for today") -> DailyMCQ:
        mcq = db.query(DailyMCQ).filter(DailyMCQ.date == DateTimeUtils.today()).first()
        if mcq is None:
            raise NotFoundError(message)
        return mcq

    def _attempt(self, db: Session, user_id: str, mcq_id: str) -> Optional[MCQAttempt]:
        return (
            db.query(MCQAttempt)
            .filter(MCQAttempt.user_id == user_id, MCQAttempt.daily_mcq_id == mcq_id)
            .first()
        )

    def get_today(self, db: Session, user: Optional[User]) -> Dict[str, Any]:
        mcq = self._today_mcq(db)
        attempted = False
        if user is not None:
            attempt = self._attempt(db, user.id, mcq.id)
            attempted = bool(attempt and attempt.completed_at)

        data = mcq.to_dict(exclude=("date", "created_at"))
        data["attempted"] = attempted
        return data

    def get_questions(self, db: Session) -> Dict[str, Any]:
        mcq = self._today_mcq(db)
        questions = []
        for question in mcq.questions:
            item = question.to_dict()
            questions.append({key: item[key] for key in map(to_camel, QUESTION_FIELDS)})

        return {
            "mcqId": mcq.id,
            "timeLimit": mcq.time_limit,
            "totalMarks": mcq.total_marks,
            "questions": questions,
        }

    def submit(self, db: Session, user: User, request: MCQSubmitRequest) -> Dict[str, Any]:
        """Grade today's set for ``user``; only one completed submission per day"""
        mcq = self._today_mcq(db)
        attempt = self._attempt(db, user.id, mcq.id)
        if attempt is not None and attempt.completed_at:
            raise BadRequestError("You have already submitted today's MCQ")

        answers = {answer.question_id: answer for answer in request.answers}

        correct = wrong = skipped = 0
        topic_results: Dict[str, Dict[str, int]] = {}
        graded: List[Dict[str, Any]] = []

        for question in mcq.questions:
            answer = answers.get(question.id)
            selected = answer.selected_option if answer and answer.selected_option else None
            is_correct = (selected == question.correct_option) if selected else None

            if selected is None:
                skipped += 1
            elif is_correct:
                correct += 1
            else:
                wrong += 1

            tally = topic_results.setdefault(question.category, {"correct": 0, "total": 0})
            tally["total"] += 1
            if is_correct:
                tally["correct"] += 1

            graded.append({
                "question_id": question.id,
                "selected_option": selected,
                "is_correct": is_correct,
                "time_taken": answer.time_taken if answer else 0,
            })

        accuracy = percentage(correct, correct + wrong)
        score = correct * (mcq.total_marks / mcq.question_count) if mcq.question_count else 0
        strong, weak = split_topics(topic_results, config.STRONG_TOPIC_RATIO, config.WEAK_TOPIC_RATIO)

        if attempt is None:
            attempt = MCQAttempt(user_id=user.id, daily_mcq_id=mcq.id)
            db.add(attempt)

        attempt.score = round_to(score, 1)
        attempt.total_marks = mcq.total_marks
        attempt.correct_count = correct
        attempt.wrong_count = wrong
        attempt.skipped_count = skipped
        attempt.accuracy = round_to(accuracy, 1)
        attempt.time_taken = request.time_taken or 0
        attempt.strong_topics = strong
        attempt.weak_topics = weak
        attempt.completed_at = DateTimeUtils.now()
        db.flush()

        existing = {response.question_id: response for response in attempt.responses}
        for row in graded:
            response = existing.get(row["question_id"])
            if response is None:
                db.add(MCQResponse(attempt_id=attempt.id, **row))
            else:
                response.selected_option = row["selected_option"]
                response.is_correct = row["is_correct"]
                response.time_taken = row["time_taken"]

        self.progress.log_activity(
            db, user.id, "mcq", "Completed Daily MCQ",
            f"Scored {correct}/{mcq.question_count} ({round_to(accuracy)}%)",
        )
        self.progress.record_activity_day(db, user.id)
        db.commit()

        logger.info(f"✅ MCQ submitted by {user.id}: {correct} correct, {wrong} wrong, {skipped} skipped")

        return {
            "attemptId": attempt.id,
            "score": attempt.score,
            "totalMarks": attempt.total_marks,
            "correctCount": correct,
            "wrongCount": wrong,
            "skippedCount": skipped,
            "accuracy": attempt.accuracy,
            "timeTaken": attempt.time_taken,
            "strongTopics": strong,
            "weakTopics": weak,
        }

    def get_results(self, db: Session, user: User) -> Dict[str, Any]:
        mcq = self._today_mcq(db, "No MCQ challenge for today")
        attempt = self._attempt(db, user.id, mcq.id)
        if attempt is None:
            raise NotFoundError("No attempt found for today")

        higher = (
            db.query(MCQAttempt)
            .filter(MCQAttempt.daily_mcq_id == mcq.id, MCQAttempt.score > attempt.score)
            .count()
        )
        total = db.query(MCQAttempt).filter(MCQAttempt.daily_mcq_id == mcq.id).count()
        rank_percentile = round_to(percentage(total - higher, total))

        attempt.percentile = rank_percentile
        db.commit()

        data = attempt.to_dict()
        data.update({
            "rank": higher + 1,
            "percentile": rank_percentile,
            "totalParticipants": total,
            "questionCount": mcq.question_count,
        })
        return data

    def get_review(self, db: Session, user: User) -> Dict[str, Any]:
        mcq = self._today_mcq(db, "No MCQ challenge for today")
        attempt = self._attempt(db, user.id, mcq.id)
        if attempt is None:
            raise NotFoundError("No attempt found")

        responses = {response.question_id: response for response in attempt.responses}
        review = []
        for question in mcq.questions:
            response = responses.get(question.id)
            item = question.to_dict(exclude=("daily_mcq_id",))
            item["selectedOption"] = response.selected_option if response else None
            item["isCorrect"] = bool(response and response.is_correct)
            review.append(item)

        return {"questions": review}

    def get_recommendations(self, db: Session, user: User) -> Dict[str, Any]:
        mcq = self._today_mcq(db, "No MCQ for today")
        attempt = self._attempt(db, user.id, mcq.id)

        recommendations = []
        if attempt is not None:
            if attempt.weak_topics:
                recommendations.append(ResponseFormatter.recommendation(
                    "study", "Review Weak Areas", f"Focus on: {', '.join(attempt.weak_topics)}",
                    "Go to Study Material", "/dashboard/library",
                ))
            if attempt.accuracy < config.MCQ_PRACTICE_ACCURACY:
                recommendations.append(ResponseFormatter.recommendation(
                    "practice", "Practice More MCQs", "Build your accuracy with subject-wise practice",
                    "Start Mock Test", "/dashboard/mock-tests",
                ))
            recommendations.append(ResponseFormatter.recommendation(
                "editorial", "Read Today's Editorial", "Stay updated with current affairs analysis",
                "Read Editorials", "/dashboard/daily-editorial",
            ))
            recommendations.append(ResponseFormatter.recommendation(
                "answer", "Practice Answer Writing", "Attempt today's mains question",
                "Write Answer", "/dashboard/daily-answer",
            ))

        return {"recommendations": recommendations}


# Singleton pattern for MCQ service
_mcq_service = None


def get_mcq_service() -> MCQService:
    global _mcq_service
    if _mcq_service is None:
        _mcq_service = MCQService()
    return _mcq_service
