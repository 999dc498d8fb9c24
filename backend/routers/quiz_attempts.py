import math

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.quiz import Quiz, QuizAttempt
from services.auth import AuthenticatedUser, require_user
from services.quiz_store import fetch_questions
from services.scoring import score_attempt

router = APIRouter(prefix="/api/quiz-attempts", tags=["quizzes"])


@router.get("/{attempt_id}")
async def get_attempt(
    attempt_id: str,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(require_user),
):
    attempt = await db.get(QuizAttempt, attempt_id)
    if not attempt:
        return JSONResponse(status_code=404, content={"error": "Quiz attempt not found"})
    if attempt.user_id != user.id and user.role != "admin":
        return JSONResponse(status_code=403, content={"error": "Unauthorized"})

    quiz = await db.get(Quiz, attempt.quiz_id)
    questions = await fetch_questions(db, attempt.quiz_id)
    # Per-question results are regraded from the stored answers; totals come from the attempt row.
    details = score_attempt(questions, attempt.answers or {}, quiz.passing_score if quiz else None)

    return {
        "success": True,
        "data": {
            "id": attempt.id,
            "quiz_id": attempt.quiz_id,
            "quiz_title": quiz.title if quiz else "Unknown Quiz",
            "score": attempt.score,
            "total_points": attempt.total_points,
            "total_questions": attempt.total_questions,
            "correct_answers": details.correct_answers,
            "time_taken_minutes": math.ceil(attempt.time_taken_seconds / 60),
            "completed_at": attempt.completed_at,
            "percentage_score": attempt.percentage_score,
            "passed": attempt.passed,
            "attempt_number": attempt.attempt_number,
            "answers": details.results,
        },
    }
