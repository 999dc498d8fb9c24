"""Admin quiz management. Quizzes are validated before anything is stored."""
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.quiz import Quiz, QuizAttempt, QuizQuestion
from schemas.quiz_store import QuizCreate, QuizRead, QuizSummary, QuizUpdate
from services.auth import AuthenticatedUser, require_instructor
from services.quiz_store import (
    MAX_QUESTIONS_PER_QUIZ, count_by_quiz, delete_quiz, quiz_detail, replace_questions,
)
from services.validation import validate_quiz

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/quizzes", tags=["quizzes"])


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _check_quiz(title: str | None, description: str | None, questions: list) -> JSONResponse | None:
    if len(questions) > MAX_QUESTIONS_PER_QUIZ:
        return _error(400, f"Maximum {MAX_QUESTIONS_PER_QUIZ} questions allowed per quiz")
    result = validate_quiz({"title": title, "description": description, "questions": questions})
    if not result.is_valid:
        return _error(400, "Quiz validation failed", validation=result.model_dump(by_alias=True))
    return None


@router.get("")
async def list_quizzes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    category: str = "",
    difficulty: str = "",
    db: AsyncSession = Depends(get_db),
    _user: AuthenticatedUser = Depends(require_instructor),
):
    query = select(Quiz)
    if search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Quiz.title.ilike(pattern), Quiz.description.ilike(pattern)))
    if category:
        query = query.where(Quiz.category == category)
    if difficulty:
        query = query.where(Quiz.difficulty == difficulty)

    try:
        total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0
        result = await db.execute(
            query.order_by(Quiz.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )
        quizzes = result.scalars().all()
        ids = [q.id for q in quizzes]
        question_counts = await count_by_quiz(db, QuizQuestion.quiz_id, ids)
        attempt_counts = await count_by_quiz(db, QuizAttempt.quiz_id, ids)
    except SQLAlchemyError as e:
        logger.error("Error fetching quizzes: %s", e)
        return _error(500, "Failed to fetch quizzes")

    summaries = [
        QuizSummary(
            **QuizRead.model_validate(q).model_dump(),
            question_count=question_counts.get(q.id, 0),
            attempt_count=attempt_counts.get(q.id, 0),
        )
        for q in quizzes
    ]
    return {
        "quizzes": summaries,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": (total + limit - 1) // limit,
        },
    }


@router.get("/{quiz_id}")
async def get_quiz(
    quiz_id: str,
    db: AsyncSession = Depends(get_db),
    _user: AuthenticatedUser = Depends(require_instructor),
):
    quiz = await db.get(Quiz, quiz_id)
    if not quiz:
        return _error(404, "Quiz not found")
    return {"success": True, "quiz": await quiz_detail(db, quiz)}


@router.post("", status_code=201)
async def create_quiz(
    data: QuizCreate,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(require_instructor),
):
    questions = data.questions or []
    rejected = _check_quiz(data.title, data.description, questions)
    if rejected is not None:
        return rejected

    quiz = Quiz(
        title=data.title.strip(),
        description=data.description.strip(),
        category=data.category or None,
        difficulty=data.difficulty or "intermediate",
        duration_minutes=data.duration_minutes or 30,
        passing_score=data.passing_score if data.passing_score is not None else 70,
        max_attempts=data.max_attempts if data.max_attempts is not None else 0,
        image_url=data.image_url or None,
        is_published=bool(data.is_published),
        instructor_id=user.id,
    )
    try:
        db.add(quiz)
        await db.flush()
        count = await replace_questions(db, quiz.id, questions)
        await db.commit()
        await db.refresh(quiz)
        detail = await quiz_detail(db, quiz)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error creating quiz: %s", e)
        return _error(500, "Failed to create quiz")

    logger.info("Quiz %s created by %s with %d questions", quiz.id, user.email, count)
    return {"success": True, "quiz": detail, "message": f"Quiz created successfully with {count} questions"}


@router.put("")
async def update_quiz(
    data: QuizUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(require_instructor),
):
    if not data.id:
        return _error(400, "Quiz ID is required")

    changes = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"id", "questions"})
    try:
        quiz = await db.get(Quiz, data.id)
        if not quiz:
            return _error(404, "Quiz not found")

        title = changes.get("title", quiz.title)
        description = changes.get("description", quiz.description)
        if data.questions is not None:
            rejected = _check_quiz(title, description, data.questions)
            if rejected is not None:
                return rejected
        elif not (title or "").strip():
            return _error(400, "Quiz title is required")

        for key, value in changes.items():
            setattr(quiz, key, value.strip() if key in ("title", "description") else value)
        if data.questions is not None:
            await replace_questions(db, quiz.id, data.questions)
        await db.commit()
        await db.refresh(quiz)
        detail = await quiz_detail(db, quiz)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error updating quiz %s: %s", data.id, e)
        return _error(500, "Failed to update quiz")

    logger.info("Quiz %s updated by %s", quiz.id, user.email)
    return {"success": True, "quiz": detail}


@router.delete("")
async def remove_quiz(
    id: str | None = None,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(require_instructor),
):
    if not id:
        return _error(400, "Quiz ID is required")

    try:
        quiz = await db.get(Quiz, id)
        if not quiz:
            return _error(404, "Quiz not found")
        await delete_quiz(db, quiz)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error deleting quiz %s: %s", id, e)
        return _error(500, "Failed to delete quiz")

    logger.info("Quiz %s deleted by %s", id, user.email)
    return {"success": True}
