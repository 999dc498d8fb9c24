from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, computed_field

from services.sanitizer import render_markup


class QuizCreate(BaseModel):
    # Title, description and questions are checked by validate_quiz.
    title: str | None = None
    description: str | None = None
    category: str | None = None
    difficulty: str | None = None
    duration_minutes: int | None = Field(default=None, ge=1)
    passing_score: int | None = Field(default=None, ge=0, le=100)
    max_attempts: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    is_published: bool | None = None
    questions: list[Any] | None = None


class QuizUpdate(QuizCreate):
    id: str | None = None


class QuizRead(BaseModel):
    id: str
    title: str
    description: str | None
    category: str | None
    difficulty: str
    duration_minutes: int
    passing_score: int
    max_attempts: int
    image_url: str | None
    is_published: bool
    instructor_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class QuizSummary(QuizRead):
    question_count: int = 0
    attempt_count: int = 0


class QuizQuestionPublic(BaseModel):
    """A question as shown to a student taking the quiz: no answers."""

    id: str
    question: str
    question_type: str
    options: list
    points: int
    order_index: int

    model_config = {"from_attributes": True}


class QuizQuestionRead(QuizQuestionPublic):
    correct_answer: Any = None
    correct_answer_text: str | None = None
    explanation: str | None = None
    difficulty_level: str = "medium"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def explanation_html(self) -> str:
        return render_markup(self.explanation)


class QuizDetail(QuizRead):
    questions: list[QuizQuestionRead] = Field(default_factory=list)


class QuizPublic(QuizRead):
    questions: list[QuizQuestionPublic] = Field(default_factory=list)


class AttemptResult(BaseModel):
    id: str
    score: int
    total_points: int
    total_questions: int
    percentage_score: float
    passed: bool
    attempt_number: int
