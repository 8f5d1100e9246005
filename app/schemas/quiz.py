"""
Quiz Schemas

Pydantic models for quiz-related API requests and responses.
"""

from datetime import datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, StrictInt, field_validator


# ============================================================
# Request Schemas
# ============================================================

class QuizCreate(BaseModel):
    """Request to create a quiz (always created as a draft)."""
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    cover_image: Optional[str] = Field(
        None,
        max_length=500,
        description="URL or storage key of the cover image"
    )

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Title must be at least 3 characters long")
        return v


class QuizUpdate(BaseModel):
    """Partial update; only fields that are sent are changed."""
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    cover_image: Optional[str] = Field(None, max_length=500)
    is_published: Optional[bool] = None

    @field_validator("title", "is_published")
    @classmethod
    def reject_null(cls, v):
        # These columns are NOT NULL: they may be omitted but not cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class QuestionCreate(BaseModel):
    text: str = Field(..., min_length=5)
    order: int = Field(..., ge=1, description="Position of the question within the quiz")
    points: int = Field(default=1, ge=1)


class AnswerCreate(BaseModel):
    text: str = Field(..., min_length=1)
    is_correct: bool
    explanation: Optional[str] = None


class QuizSubmitRequest(BaseModel):
    """
    Answers for a quiz attempt.

    `answers` maps question id -> selected answer id. Keys that are not
    questions of the quiz are ignored.
    """
    answers: Dict[str, StrictInt] = Field(
        ...,
        description="Map of question id to the chosen answer id"
    )
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds spent on the quiz")


# ============================================================
# Response Schemas
# ============================================================

class QuizResponse(BaseModel):
    """Quiz metadata response."""
    id: int
    title: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    created_by: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AnswerResponse(BaseModel):
    id: int
    question_id: int
    text: str
    is_correct: bool
    explanation: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuestionResponse(BaseModel):
    id: int
    quiz_id: int
    text: str
    order: int
    points: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuestionDetailResponse(QuestionResponse):
    """Question with its answers."""
    answers: List[AnswerResponse] = []


class QuizDetailResponse(QuizResponse):
    """Quiz with questions and answers."""
    questions: List[QuestionDetailResponse] = []


class SubmissionResponse(BaseModel):
    id: int
    user_id: int
    quiz_id: int
    score: int
    total_questions: int
    correct_answers: int
    time_spent: Optional[int] = None
    answers: Optional[Dict[str, int]] = None
    completed_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionResultResponse(BaseModel):
    """Score breakdown returned right after submitting."""
    score: int
    total_questions: int
    correct_answers: int
    max_score: int
    ignored_question_ids: List[str] = []
    submission: SubmissionResponse


class QuizLeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    user_email: str
    score: int
    completed_at: datetime


class GlobalLeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    email: str
    total_score: int


class MessageResponse(BaseModel):
    message: str
