from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["error", "warning"]


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Severity = "error"
    code: str | None = None
    question_index: int | None = None
    suggestion: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuizValidationResult(BaseModel):
    is_valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuizValidationRequest(BaseModel):
    # Missing or malformed fields are reported by validate_quiz, not rejected here.
    title: str | None = None
    description: str | None = None
    category: str | None = None
    duration_minutes: int | None = None
    questions: list[Any] | None = None
