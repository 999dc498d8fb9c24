"""AI quiz generation endpoints. Responses use the {success, ...} envelope."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from schemas.quiz import (
    DEFAULT_DIFFICULTY, DEFAULT_LANGUAGE, DEFAULT_QUESTION_COUNT, DEFAULT_QUESTION_TYPES,
    DEFAULT_SUBJECT, DIFFICULTIES, GENERATED_QUESTION_TYPES, LANGUAGES, QuizGenerationRequest,
)
from services.auth import AuthenticatedUser, require_instructor
from services.quiz_generator import QuizGenerator, get_quiz_generator
from services.validation import from_pydantic_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/generate-quiz", tags=["quiz generation"])

FALLBACK_ERROR = "Internal server error occurred during quiz generation"


def _failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, **extra})


@router.post("")
async def generate_quiz(
    request: Request,
    generator: QuizGenerator = Depends(get_quiz_generator),
    user: AuthenticatedUser = Depends(require_instructor),
):
    try:
        body = await request.json()
    except ValueError:
        return _failure(400, "Request body must be valid JSON")
    if not isinstance(body, dict):
        return _failure(400, "Request body must be a JSON object")

    topic = body.get("topic")
    if not isinstance(topic, str) or not topic.strip():
        return _failure(400, "Topic is required and must be a non-empty string")

    try:
        quiz_request = QuizGenerationRequest.model_validate(body)
    except ValidationError as exc:
        issues = from_pydantic_errors(exc)
        return _failure(
            400,
            f"Invalid {issues[0].field}: {issues[0].message}",
            details=[issue.model_dump(by_alias=True, exclude_none=True) for issue in issues],
        )

    logger.info(
        "Quiz generation request from %s: subject=%r topic=%r count=%d custom_prompt=%s",
        user.email, quiz_request.subject, quiz_request.topic,
        quiz_request.question_count, bool(quiz_request.custom_prompt),
    )

    try:
        result = await generator.generate_quiz(quiz_request)
    except Exception as exc:
        logger.exception("Quiz generation API error")
        return _failure(500, str(exc) or FALLBACK_ERROR)

    if not result.get("success"):
        logger.error("Quiz generation failed: %s", result.get("error"))
        return _failure(500, result.get("error") or "Failed to generate quiz")

    payload = {key: value for key, value in result.items() if key != "debugInfo"}
    if quiz_request.include_debug_info and result.get("debugInfo"):
        payload["debugInfo"] = result["debugInfo"]
    # Echo the request with defaults filled in so the editor can show what was used.
    payload["request"] = quiz_request.model_dump(by_alias=True, exclude={"include_debug_info"})
    payload["success"] = True
    return payload


@router.get("")
async def generation_options(_user: AuthenticatedUser = Depends(require_instructor)):
    return {
        "success": True,
        "difficulties": list(DIFFICULTIES),
        "questionTypes": list(GENERATED_QUESTION_TYPES),
        "languages": list(LANGUAGES),
        "defaults": {
            "subject": DEFAULT_SUBJECT,
            "questionCount": DEFAULT_QUESTION_COUNT,
            "difficulty": DEFAULT_DIFFICULTY,
            "questionTypes": list(DEFAULT_QUESTION_TYPES),
            "language": DEFAULT_LANGUAGE,
            "explanationLanguage": DEFAULT_LANGUAGE,
        },
    }


@router.get("/health")
async def generation_health(
    generator: QuizGenerator = Depends(get_quiz_generator),
    _user: AuthenticatedUser = Depends(require_instructor),
):
    result = await generator.test_connection()
    if not result["success"]:
        return JSONResponse(status_code=503, content=result)
    return result
