"""Quiz form validation endpoint for the admin quiz editor."""
from fastapi import APIRouter, Depends

from schemas.validation import QuizValidationRequest, QuizValidationResult
from services.auth import AuthenticatedUser, require_instructor
from services.validation import validate_quiz

router = APIRouter(prefix="/api/admin/quizzes", tags=["quizzes"])


@router.post("/validate", response_model=QuizValidationResult, response_model_by_alias=True)
async def validate_quiz_form(
    data: QuizValidationRequest,
    _user: AuthenticatedUser = Depends(require_instructor),
):
    return validate_quiz(data.model_dump())
