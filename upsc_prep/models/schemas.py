# upsc_prep/models/schemas.py
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.utils import round_to


class RequestModel(BaseModel):
    """Request body accepting camelCase or snake_case field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def whole_seconds(value):
    """Null counts as zero, fractional seconds round to the nearest second"""
    if value is None:
        return 0
    if isinstance(value, float):
        return round_to(value)
    return value


# ==================== Auth ====================

class SignupRequest(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(RequestModel):
    refresh_token: Optional[str] = None


class CallbackRequest(RequestModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


# ==================== Daily MCQ ====================

class MCQAnswer(RequestModel):
    question_id: str
    selected_option: Optional[str] = None
    time_taken: int = 0

    @field_validator("time_taken", mode="before")
    @classmethod
    def coerce_time_taken(cls, value):
        return whole_seconds(value)


class MCQSubmitRequest(RequestModel):
    answers: List[MCQAnswer] = Field(default_factory=list)
    time_taken: int = 0

    @field_validator("time_taken", mode="before")
    @classmethod
    def coerce_time_taken(cls, value):
        return whole_seconds(value)


# ==================== Daily Answer ====================

class TextAnswerRequest(RequestModel):
    answer_text: Optional[str] = None


class UploadAnswerRequest(RequestModel):
    file_url: Optional[str] = None


# ==================== Mock Tests ====================

class GenerateMockTestRequest(RequestModel):
    source: Optional[str] = None
    subject: Optional[str] = None
    exam_mode: Optional[str] = None
    paper_type: Optional[str] = None
    question_count: Optional[int] = None
    difficulty: Optional[str] = None


class MockTestSubmitRequest(RequestModel):
    answers: Dict[str, Optional[str]] = Field(default_factory=dict)
    time_taken: int = 0

    @field_validator("time_taken", mode="before")
    @classmethod
    def coerce_time_taken(cls, value):
        return whole_seconds(value)


class MockTestProgressRequest(RequestModel):
    answers: Dict[str, Optional[str]] = Field(default_factory=dict)


# ==================== Study Plan ====================

class TaskCreateRequest(RequestModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = None


class TaskUpdateRequest(RequestModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = None
    is_completed: Optional[bool] = None


# ==================== Videos / Pricing ====================

class MentorQuestionRequest(RequestModel):
    question: Optional[str] = None


class BookCallRequest(RequestModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
