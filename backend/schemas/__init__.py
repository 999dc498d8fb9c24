from schemas.auth import AuthUserRead, AuthCheckResponse
from schemas.category import CategoryCreate, CategoryUpdate, CategoryRead, CategoryList
from schemas.course import CourseRead, CourseList, CourseCategoryList
from schemas.quiz import QuizGenerationRequest
from schemas.quiz_store import (
    QuizCreate, QuizUpdate, QuizRead, QuizSummary, QuizDetail, QuizPublic,
    QuizQuestionRead, QuizQuestionPublic, AttemptResult,
)
from schemas.validation import ValidationIssue, QuizValidationResult, QuizValidationRequest

__all__ = [
    "AuthUserRead", "AuthCheckResponse",
    "CategoryCreate", "CategoryUpdate", "CategoryRead", "CategoryList",
    "CourseRead", "CourseList", "CourseCategoryList",
    "QuizGenerationRequest",
    "QuizCreate", "QuizUpdate", "QuizRead", "QuizSummary", "QuizDetail", "QuizPublic",
    "QuizQuestionRead", "QuizQuestionPublic", "AttemptResult",
    "ValidationIssue", "QuizValidationResult", "QuizValidationRequest",
]
