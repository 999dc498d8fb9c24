"""Student quiz endpoints: browse published quizzes, take them and submit answers."""
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.quiz import Quiz, QuizAttempt
from schemas.quiz_store import AttemptResult, QuizRead
from services.auth import AuthenticatedUser, require_user
from services.quiz_store import fetch_questions, quiz_public
from services.scoring import score_attempt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])

MAX_ANSWERS_SIZE = 100_000


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.get("")
async def list_published_quizzes(category: str | None = None, db: AsyncSession = Depends(get_db)):
    query = select(Quiz).where(Quiz.is_published.is_(True))
    if category:
        query = query.where(Quiz.category == category)
    try:
        result = await db.execute(query.order_by(Quiz.created_at.desc()))
    except SQLAlchemyError as e:
        logger.error("Error fetching published quizzes: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch quizzes"})
    return {"quizzes": [QuizRead.model_validate(q) for q in result.scalars().all()]}


@router.get("/{quiz_id}")
async def get_published_quiz(quiz_id: str, db: AsyncSession = Depends(get_db)):
    quiz = await db.get(Quiz, quiz_id)
    if not quiz or not quiz.is_published:
        return JSONResponse(status_code=404, content={"error": "Quiz not found or not available"})
    return {"quiz": await quiz_public(db, quiz)}


@router.post("/{quiz_id}/submit")
async def submit_quiz(
    quiz_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(require_user),
):
    try:
        body = await request.json()
    except ValueError:
        return _failure(400, "Request body must be valid JSON")
    if not isinstance(body, dict):
        return _failure(400, "Request body must be a JSON object")

    answers = body.get("answers")
    if not isinstance(answers, dict):
        return _failure(400, "Invalid answers format")
    if len(json.dumps(answers)) > MAX_ANSWERS_SIZE:
        return _failure(400, "Answers data too large")
    time_taken = body.get("time_taken")
    if time_taken is not None and (
        isinstance(time_taken, bool) or not isinstance(time_taken, (int, float)) or time_taken < 0
    ):
        return _failure(400, "Invalid time_taken value")

    try:
        quiz = await db.get(Quiz, quiz_id)
        if not quiz or not quiz.is_published:
            return _failure(404, "Quiz not found or not available")

        last_attempt = await db.scalar(
            select(func.max(QuizAttempt.attempt_number)).where(
                QuizAttempt.quiz_id == quiz_id, QuizAttempt.user_id == user.id
            )
        )
        attempt_number = (last_attempt or 0) + 1
        if quiz.max_attempts and attempt_number > quiz.max_attempts:
            return _failure(403, "Maximum attempts reached")

        questions = await fetch_questions(db, quiz_id)
        outcome = score_attempt(questions, answers, quiz.passing_score)
        attempt = QuizAttempt(
            quiz_id=quiz_id,
            user_id=user.id,
            score=outcome.score,
            total_points=outcome.total_points,
            total_questions=outcome.total_questions,
            percentage_score=outcome.percentage_score,
            passed=outcome.passed,
            attempt_number=attempt_number,
            time_taken_seconds=int(time_taken or 0),
            answers=answers,
        )
        db.add(attempt)
        await db.commit()
        await db.refresh(attempt)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Failed to save quiz attempt for quiz %s, user %s: %s", quiz_id, user.id, e)
        return _failure(500, "Failed to submit quiz")

    logger.info(
        "Quiz %s submitted by %s: %d/%d points, passed=%s, attempt %d",
        quiz_id, user.id, outcome.score, outcome.total_points, outcome.passed, attempt_number,
    )
    return {
        "success": True,
        "result": AttemptResult(
            id=attempt.id,
            score=attempt.score,
            total_points=attempt.total_points,
            total_questions=attempt.total_questions,
            percentage_score=attempt.percentage_score,
            passed=attempt.passed,
            attempt_number=attempt.attempt_number,
        ),
    }
