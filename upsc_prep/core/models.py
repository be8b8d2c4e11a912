# upsc_prep/core/models.py
"""
ORM models for the UPSC preparation backend.

Every table uses string UUID primary keys. ``to_dict`` renders a row with
camelCase keys, which is the shape the frontend consumes.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Dict, Any, Iterable

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text,
    UniqueConstraint, inspect,
)
from sqlalchemy.orm import relationship

from .database import Base
from .utils import round_to


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class SerializerMixin:
    """camelCase dict rendering of mapped columns"""

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        data = {}
        for attr in inspect(self).mapper.column_attrs:
            if attr.key in exclude:
                continue
            value = getattr(self, attr.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            data[to_camel(attr.key)] = value
        return data


# ==================== Users ====================

class User(SerializerMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    supabase_id = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    phone = Column(String(32))
    avatar_url = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class UserActivity(SerializerMixin, Base):
    __tablename__ = "user_activities"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        data = super().to_dict(exclude=("meta", *exclude))
        data["metadata"] = self.meta
        return data


class UserStreak(SerializerMixin, Base):
    __tablename__ = "user_streaks"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(Date)
    week_activity = Column(JSON, nullable=False, default=lambda: [False] * 7)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


# ==================== Daily MCQ ====================

class DailyMCQ(SerializerMixin, Base):
    __tablename__ = "daily_mcqs"

    id = Column(String(36), primary_key=True, default=generate_id)
    date = Column(Date, unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    topic = Column(String(255))
    tags = Column(JSON, nullable=False, default=list)
    question_count = Column(Integer, nullable=False, default=0)
    time_limit = Column(Integer, nullable=False, default=15)
    total_marks = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    questions = relationship("MCQQuestion", back_populates="daily_mcq", cascade="all, delete-orphan",
                             order_by="MCQQuestion.question_num")


class MCQQuestion(SerializerMixin, Base):
    __tablename__ = "mcq_questions"

    id = Column(String(36), primary_key=True, default=generate_id)
    daily_mcq_id = Column(String(36), ForeignKey("daily_mcqs.id", ondelete="CASCADE"), nullable=False, index=True)
    question_num = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    difficulty = Column(String(32), nullable=False, default="Moderate")
    options = Column(JSON, nullable=False, default=list)
    correct_option = Column(String(8), nullable=False)
    explanation = Column(Text)

    daily_mcq = relationship("DailyMCQ", back_populates="questions")


class MCQAttempt(SerializerMixin, Base):
    __tablename__ = "mcq_attempts"
    __table_args__ = (UniqueConstraint("user_id", "daily_mcq_id", name="uq_mcq_attempt_user_mcq"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    daily_mcq_id = Column(String(36), ForeignKey("daily_mcqs.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Float, nullable=False, default=0)
    total_marks = Column(Float, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    wrong_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    accuracy = Column(Float, nullable=False, default=0)
    time_taken = Column(Integer, nullable=False, default=0)
    strong_topics = Column(JSON, nullable=False, default=list)
    weak_topics = Column(JSON, nullable=False, default=list)
    percentile = Column(Float)
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    responses = relationship("MCQResponse", back_populates="attempt", cascade="all, delete-orphan")


class MCQResponse(SerializerMixin, Base):
    __tablename__ = "mcq_responses"
    __table_args__ = (UniqueConstraint("attempt_id", "question_id", name="uq_mcq_response_attempt_question"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    attempt_id = Column(String(36), ForeignKey("mcq_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(36), ForeignKey("mcq_questions.id", ondelete="CASCADE"), nullable=False)
    selected_option = Column(String(8))
    is_correct = Column(Boolean)
    time_taken = Column(Integer, nullable=False, default=0)

    attempt = relationship("MCQAttempt", back_populates="responses")


# ==================== Daily Answer Writing ====================

class DailyMainsQuestion(SerializerMixin, Base):
    __tablename__ = "daily_mains_questions"

    id = Column(String(36), primary_key=True, default=generate_id)
    date = Column(Date, unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    question_text = Column(Text, nullable=False)
    instructions = Column(Text)
    paper = Column(String(64))
    subject = Column(String(100), nullable=False)
    marks = Column(Integer, nullable=False, default=15)
    word_limit = Column(Integer, nullable=False, default=250)
    time_limit = Column(Integer, nullable=False, default=20)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class MainsAttempt(SerializerMixin, Base):
    __tablename__ = "mains_attempts"
    __table_args__ = (UniqueConstraint("user_id", "question_id", name="uq_mains_attempt_user_question"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(36), ForeignKey("daily_mains_questions.id", ondelete="CASCADE"), nullable=False)
    answer_text = Column(Text)
    file_url = Column(String(500))
    word_count = Column(Integer, nullable=False, default=0)
    submitted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    evaluation = relationship("MainsEvaluation", back_populates="attempt", uselist=False,
                              cascade="all, delete-orphan")


class MainsEvaluation(SerializerMixin, Base):
    __tablename__ = "mains_evaluations"

    id = Column(String(36), primary_key=True, default=generate_id)
    attempt_id = Column(String(36), ForeignKey("mains_attempts.id", ondelete="CASCADE"), unique=True, nullable=False)
    score = Column(Float, nullable=False, default=0)
    max_score = Column(Float, nullable=False, default=0)
    status = Column(String(16), nullable=False, default="pending")
    strengths = Column(JSON, nullable=False, default=list)
    improvements = Column(JSON, nullable=False, default=list)
    suggestions = Column(JSON, nullable=False, default=list)
    detailed_feedback = Column(Text)
    evaluated_at = Column(DateTime(timezone=True))

    attempt = relationship("MainsAttempt", back_populates="evaluation")


# ==================== Editorials ====================

class Editorial(SerializerMixin, Base):
    __tablename__ = "editorials"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(500), nullable=False)
    source = Column(String(100), nullable=False, index=True)
    category = Column(String(100), nullable=False)
    author = Column(String(255))
    summary = Column(Text)
    content = Column(Text, nullable=False, default="")
    url = Column(String(500))
    read_time = Column(Integer, nullable=False, default=5)
    ai_summary = Column(Text)
    published_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class EditorialProgress(SerializerMixin, Base):
    __tablename__ = "editorial_progress"
    __table_args__ = (UniqueConstraint("user_id", "editorial_id", name="uq_editorial_progress_user_editorial"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    editorial_id = Column(String(36), ForeignKey("editorials.id", ondelete="CASCADE"), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))


class EditorialBookmark(SerializerMixin, Base):
    __tablename__ = "editorial_bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "editorial_id", name="uq_editorial_bookmark_user_editorial"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    editorial_id = Column(String(36), ForeignKey("editorials.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


# ==================== Mock Tests ====================

class MockTest(SerializerMixin, Base):
    __tablename__ = "mock_tests"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    source = Column(String(32), nullable=False, default="mixed")
    exam_mode = Column(String(32), nullable=False, default="prelims")
    paper_type = Column(String(64))
    subject = Column(String(100))
    difficulty = Column(String(32), nullable=False, default="mixed")
    question_count = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    total_marks = Column(Float, nullable=False)
    is_generated = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    questions = relationship("MockTestQuestion", back_populates="mock_test", cascade="all, delete-orphan",
                             order_by="MockTestQuestion.question_num")


class MockTestQuestion(SerializerMixin, Base):
    __tablename__ = "mock_test_questions"

    id = Column(String(36), primary_key=True, default=generate_id)
    mock_test_id = Column(String(36), ForeignKey("mock_tests.id", ondelete="CASCADE"), nullable=False, index=True)
    question_num = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    subject = Column(String(100), nullable=False, index=True)
    category = Column(String(100))
    difficulty = Column(String(32), nullable=False, default="Moderate")
    options = Column(JSON, nullable=False, default=list)
    correct_option = Column(String(8), nullable=False)
    explanation = Column(Text)

    mock_test = relationship("MockTest", back_populates="questions")


class MockTestAttempt(SerializerMixin, Base):
    __tablename__ = "mock_test_attempts"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mock_test_id = Column(String(36), ForeignKey("mock_tests.id", ondelete="CASCADE"), nullable=False, index=True)
    answers = Column(JSON, nullable=False, default=dict)
    score = Column(Float, nullable=False, default=0)
    total_marks = Column(Float, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    wrong_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    accuracy = Column(Float, nullable=False, default=0)
    time_taken = Column(Integer, nullable=False, default=0)
    subject_wise = Column(JSON, nullable=False, default=dict)
    analysis = Column(Text)
    # NULL while the attempt is a saved draft
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


# ==================== Study Planner ====================

class StudyPlanTask(SerializerMixin, Base):
    __tablename__ = "study_plan_tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    subject = Column(String(100))
    type = Column(String(32), nullable=False, default="study")
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(8))
    end_time = Column(String(8))
    duration = Column(Integer)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class StudyStreak(SerializerMixin, Base):
    __tablename__ = "study_streaks"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    total_study_days = Column(Integer, nullable=False, default=0)
    last_study_date = Column(Date)


class WeeklyGoal(SerializerMixin, Base):
    __tablename__ = "weekly_goals"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    target_count = Column(Integer, nullable=False)
    current_count = Column(Integer, nullable=False, default=0)
    week_start = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class SyllabusCoverage(SerializerMixin, Base):
    __tablename__ = "syllabus_coverage"

    id = Column(String(36), primary_key=True, default=generate_id)
    subject = Column(String(100), unique=True, nullable=False)
    total_topics = Column(Integer, nullable=False)
    covered_topics = Column(Integer, nullable=False, default=0)

    @property
    def percentage(self) -> int:
        if not self.total_topics:
            return 0
        return round_to(self.covered_topics / self.total_topics * 100)


# ==================== Library ====================

class Subject(SerializerMixin, Base):
    __tablename__ = "subjects"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    icon_url = Column(String(500))
    tags = Column(JSON, nullable=False, default=list)
    order = Column(Integer, nullable=False, default=0)

    chapters = relationship("Chapter", back_populates="subject", cascade="all, delete-orphan",
                            order_by="Chapter.order")


class Chapter(SerializerMixin, Base):
    __tablename__ = "chapters"

    id = Column(String(36), primary_key=True, default=generate_id)
    subject_id = Column(String(36), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    order = Column(Integer, nullable=False, default=0)

    subject = relationship("Subject", back_populates="chapters")
    materials = relationship("StudyMaterial", back_populates="chapter", cascade="all, delete-orphan")


class StudyMaterial(SerializerMixin, Base):
    __tablename__ = "study_materials"

    id = Column(String(36), primary_key=True, default=generate_id)
    chapter_id = Column(String(36), ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(32), nullable=False, default="pdf")
    file_url = Column(String(500), nullable=False)
    file_size = Column(Integer)
    page_count = Column(Integer)

    chapter = relationship("Chapter", back_populates="materials")


# ==================== Videos ====================

class VideoSubject(SerializerMixin, Base):
    __tablename__ = "video_subjects"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    icon_url = Column(String(500))
    order = Column(Integer, nullable=False, default=0)

    videos = relationship("Video", back_populates="subject", cascade="all, delete-orphan")


class Video(SerializerMixin, Base):
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=generate_id)
    subject_id = Column(String(36), ForeignKey("video_subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    video_url = Column(String(500), nullable=False)
    thumbnail_url = Column(String(500))
    duration = Column(Integer)
    instructor = Column(String(100))
    order = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    subject = relationship("VideoSubject", back_populates="videos")


# ==================== Pricing & Mentorship ====================

class PricingPlan(SerializerMixin, Base):
    __tablename__ = "pricing_plans"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    price = Column(Integer, nullable=False)
    duration = Column(String(32), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    is_popular = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)


class Testimonial(SerializerMixin, Base):
    __tablename__ = "testimonials"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    title = Column(String(255))
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    avatar_url = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)


class MentorBooking(SerializerMixin, Base):
    __tablename__ = "mentor_bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(32))
    message = Column(Text)
    status = Column(String(16), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class MentorQuestion(SerializerMixin, Base):
    __tablename__ = "mentor_questions"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text)
    status = Column(String(16), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
