# upsc_prep/services/mock_test_service.py
import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.config import config
from ..core.dummy_data import (
    CORE_SUBJECTS, MIXED_DIFFICULTIES, MOCK_TEST_CONFIG, MOCK_TEST_SUBJECTS, STATEMENT_OPTIONS,
)
from ..core.errors import NotFoundError
from ..core.models import MockTest, MockTestAttempt, MockTestQuestion, User
from ..core.utils import DateTimeUtils, ResponseFormatter, percentage, round_to
from ..models.schemas import GenerateMockTestRequest
from .progress_service import get_progress_service

logger = logging.getLogger(__name__)

ALL_SUBJECTS = "All Subjects"


def weak_subjects(subject_wise: Dict[str, Dict[str, int]]) -> List[str]:
    return [
        name for name, tally in subject_wise.items()
        if tally.get("total", 0) > 0 and tally.get("correct", 0) / tally["total"] < config.WEAK_TOPIC_RATIO
    ]


def build_analysis(correct: int, wrong: int, skipped: int, total: int,
                   subject_wise: Dict[str, Dict[str, int]]) -> str:
    """Plain-language summary shown under the mock test score"""
    accuracy = percentage(correct, correct + wrong)
    analysis = f"You answered {correct} out of {total} questions correctly ({round_to(accuracy)}% accuracy). "
    if wrong > 0:
        analysis += f"{wrong} incorrect answers resulted in negative marking. "
    if skipped > 0:
        analysis += f"{skipped} questions were left unattempted. "

    weak = weak_subjects(subject_wise)
    if weak:
        analysis += f"Areas needing improvement: {', '.join(weak)}. "
    analysis += "Keep practicing regularly to improve your scores."
    return analysis


class MockTestService:
    """Mock test generation, drafts, scoring and review"""

    def __init__(self):
        self.progress = get_progress_service()

    # ==================== Catalogue ====================

    def get_subjects(self, db: Session) -> List[Dict[str, Any]]:
        subjects = [dict(subject) for subject in MOCK_TEST_SUBJECTS]

        counts = dict(
            db.query(MockTestQuestion.subject, func.count(MockTestQuestion.id))
            .group_by(MockTestQuestion.subject)
            .all()
        )
        if counts:
            for subject in subjects:
                if subject["name"] != ALL_SUBJECTS and subject["name"] in counts:
                    subject["count"] = counts[subject["name"]]
            subjects[0]["count"] = sum(counts.values())
        return subjects

    def get_config(self) -> Dict[str, Any]:
        return MOCK_TEST_CONFIG

    # ==================== Generation ====================

    def generate(self, db: Session, user: User, request: GenerateMockTestRequest) -> Dict[str, Any]:
        count = max(1, min(request.question_count or config.MOCK_DEFAULT_QUESTIONS, config.MOCK_MAX_QUESTIONS))
        duration = round_to(count * config.MOCK_MINUTES_PER_QUESTION)
        total_marks = count * config.MOCK_MARKS_PER_QUESTION

        subject = request.subject if request.subject and request.subject != ALL_SUBJECTS else None
        difficulty = request.difficulty or "mixed"
        exam_mode = request.exam_mode or "prelims"

        mock_test = MockTest(
            title=f"{request.subject or 'Mixed'} - {exam_mode} Practice",
            source=request.source or "mixed",
            exam_mode=exam_mode,
            paper_type=request.paper_type,
            subject=subject,
            difficulty=difficulty,
            question_count=count,
            duration=duration,
            total_marks=total_marks,
            is_generated=True,
            created_by=user.id,
        )
        db.add(mock_test)
        db.flush()

        subject_list = [subject] if subject else CORE_SUBJECTS
        difficulty_list = MIXED_DIFFICULTIES if request.difficulty == "mixed" else [request.difficulty or "Moderate"]

        for number in range(1, count + 1):
            q_subject = random.choice(subject_list)
            db.add(MockTestQuestion(
                mock_test_id=mock_test.id,
                question_num=number,
                question_text=(
                    f"Sample {q_subject} question {number}: Which of the following statements about "
                    f"{q_subject.lower()} is/are correct?\n\n"
                    f"1. Statement A related to {q_subject}\n"
                    f"2. Statement B related to {q_subject}\n"
                    f"3. Statement C related to {q_subject}"
                ),
                subject=q_subject,
                category=q_subject,
                difficulty=random.choice(difficulty_list),
                options=[dict(option) for option in STATEMENT_OPTIONS],
                correct_option=random.choice(STATEMENT_OPTIONS)["id"],
                explanation=(
                    f"This is the explanation for question {number}. The correct answer requires "
                    f"understanding of key concepts in {q_subject}."
                ),
            ))

        self.progress.log_activity(db, user.id, "mock_test", "Generated Mock Test",
                                   f"{count} questions on {request.subject or 'Mixed'}")
        db.commit()
        logger.info(f"✅ Generated mock test {mock_test.id} with {count} questions")

        return {
            "testId": mock_test.id,
            "title": mock_test.title,
            "questionCount": mock_test.question_count,
            "duration": mock_test.duration,
            "totalMarks": mock_test.total_marks,
        }

    def _get_test(self, db: Session, test_id: str) -> MockTest:
        test = db.get(MockTest, test_id)
        if test is None:
            raise NotFoundError("Test not found")
        return test

    def get_questions(self, db: Session, test_id: str) -> Dict[str, Any]:
        test = self._get_test(db, test_id)
        questions = [
            question.to_dict(exclude=("mock_test_id", "correct_option", "explanation"))
            for question in test.questions
        ]
        return {
            "testId": test.id,
            "title": test.title,
            "duration": test.duration,
            "totalMarks": test.total_marks,
            "questions": questions,
        }

    # ==================== Attempts ====================

    def _draft(self, db: Session, user_id: str, test_id: str) -> Optional[MockTestAttempt]:
        return (
            db.query(MockTestAttempt)
            .filter(
                MockTestAttempt.user_id == user_id,
                MockTestAttempt.mock_test_id == test_id,
                MockTestAttempt.completed_at.is_(None),
            )
            .first()
        )

    def _latest_completed(self, db: Session, user_id: str, test_id: str) -> Optional[MockTestAttempt]:
        return (
            db.query(MockTestAttempt)
            .filter(
                MockTestAttempt.user_id == user_id,
                MockTestAttempt.mock_test_id == test_id,
                MockTestAttempt.completed_at.isnot(None),
            )
            .order_by(MockTestAttempt.completed_at.desc())
            .first()
        )

    def submit(self, db: Session, user: User, test_id: str, answers: Dict[str, Optional[str]],
               time_taken: int) -> Dict[str, Any]:
        test = self._get_test(db, test_id)
        answers = {key: value for key, value in (answers or {}).items() if value}

        correct = wrong = skipped = 0
        subject_wise: Dict[str, Dict[str, int]] = {}
        for question in test.questions:
            selected = answers.get(question.id)
            tally = subject_wise.setdefault(question.subject, {"correct": 0, "wrong": 0, "total": 0})
            tally["total"] += 1
            if not selected:
                skipped += 1
            elif selected == question.correct_option:
                correct += 1
                tally["correct"] += 1
            else:
                wrong += 1
                tally["wrong"] += 1

        raw_score = correct * config.MOCK_MARKS_PER_QUESTION - wrong * config.MOCK_NEGATIVE_MARKS
        score = max(0, round_to(raw_score, 1))
        accuracy = round_to(percentage(correct, correct + wrong), 1)

        attempt = self._draft(db, user.id, test.id)
        if attempt is None:
            attempt = MockTestAttempt(user_id=user.id, mock_test_id=test.id)
            db.add(attempt)

        attempt.answers = answers
        attempt.score = score
        attempt.total_marks = test.total_marks
        attempt.correct_count = correct
        attempt.wrong_count = wrong
        attempt.skipped_count = skipped
        attempt.accuracy = accuracy
        attempt.time_taken = time_taken or 0
        attempt.subject_wise = subject_wise
        attempt.analysis = build_analysis(correct, wrong, skipped, test.question_count, subject_wise)
        attempt.completed_at = DateTimeUtils.now()

        self.progress.log_activity(db, user.id, "mock_test", "Completed Mock Test",
                                   f"Score: {round_to(raw_score)}/{round_to(test.total_marks)}")
        db.commit()
        logger.info(f"✅ Mock test {test.id} submitted by {user.id}: score {score}")

        return {"attemptId": attempt.id, "testId": test.id}

    def save_progress(self, db: Session, user: User, test_id: str, answers: Dict[str, Optional[str]]):
        test = self._get_test(db, test_id)
        draft = self._draft(db, user.id, test.id)
        if draft is None:
            draft = MockTestAttempt(user_id=user.id, mock_test_id=test.id, total_marks=0)
            db.add(draft)
        draft.answers = {key: value for key, value in (answers or {}).items() if value}
        db.commit()

    def get_results(self, db: Session, user: User, test_id: str) -> Dict[str, Any]:
        attempt = self._latest_completed(db, user.id, test_id)
        if attempt is None:
            raise NotFoundError("No completed attempt found")

        test = self._get_test(db, test_id)
        answers = attempt.answers or {}
        review = []
        for question in test.questions:
            selected = answers.get(question.id)
            review.append({
                "id": question.id,
                "questionNum": question.question_num,
                "questionText": question.question_text,
                "subject": question.subject,
                "options": question.options,
                "correctOption": question.correct_option,
                "selectedOption": selected,
                "isCorrect": selected == question.correct_option,
                "explanation": question.explanation,
            })

        data = attempt.to_dict()
        data["title"] = test.title
        data["questions"] = review
        return data

    def get_recommendations(self, db: Session, user: User, test_id: str) -> Dict[str, Any]:
        attempt = self._latest_completed(db, user.id, test_id)
        recommendations = []

        if attempt is not None:
            weak = weak_subjects(attempt.subject_wise or {})
            if weak:
                recommendations.append(ResponseFormatter.recommendation(
                    "study", "Review Weak Subjects", f"Focus on: {', '.join(weak)}",
                    "Study Material", "/dashboard/library",
                ))
            if attempt.accuracy < config.MOCK_PRACTICE_ACCURACY:
                recommendations.append(ResponseFormatter.recommendation(
                    "practice", "More Practice Needed", "Try easier difficulty to build confidence",
                    "Generate Easy Test", "/dashboard/mock-tests",
                ))

        recommendations.append(ResponseFormatter.recommendation(
            "mcq", "Daily MCQ Challenge", "Keep your streak going", "Start MCQ", "/dashboard/daily-mcq",
        ))
        recommendations.append(ResponseFormatter.recommendation(
            "answer", "Practice Answer Writing", "Improve your mains score", "Write Answer",
            "/dashboard/daily-answer",
        ))

        streak = self.progress.get_user_streak(db, user.id)
        return {
            "recommendations": recommendations,
            "streak": streak.to_dict() if streak else {"currentStreak": 0},
        }


# Singleton pattern for mock test service
_mock_test_service = None


def get_mock_test_service() -> MockTestService:
    global _mock_test_service
    if _mock_test_service is None:
        _mock_test_service = MockTestService()
    return _mock_test_service
