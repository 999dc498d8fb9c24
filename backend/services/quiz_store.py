"""Persistence helpers shared by the admin and student quiz routes."""
from collections.abc import Mapping

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.quiz import Quiz, QuizAttempt, QuizQuestion
from schemas.quiz_store import QuizDetail, QuizPublic, QuizQuestionPublic, QuizQuestionRead, QuizRead
from services.validation import normalize_question_type

MAX_QUESTIONS_PER_QUIZ = 50


def build_question_rows(quiz_id: str, questions: list[Mapping]) -> list[QuizQuestion]:
    """Turn validated editor questions into rows. Incoming ids (e.g. temp_...) are discarded."""
    rows = []
    for index, q in enumerate(questions):
        question_type = normalize_question_type(q.get("question_type"))
        answer = q.get("correct_answer")
        if question_type in ("matching", "ordering") and q.get("correct_answer_json") is not None:
            answer = q["correct_answer_json"]
        elif question_type in ("fill_blank", "essay"):
            answer = 0
        rows.append(
            QuizQuestion(
                quiz_id=quiz_id,
                question=q["question"].strip(),
                question_type=question_type,
                options=q.get("options") or [],
                correct_answer=answer,
                correct_answer_text=q.get("correct_answer_text") or None,
                explanation=q.get("explanation") or None,
                points=q.get("points") or 1,
                order_index=index,
                difficulty_level=q.get("difficulty_level") or "medium",
            )
        )
    return rows


async def fetch_questions(db: AsyncSession, quiz_id: str) -> list[QuizQuestion]:
    result = await db.execute(
        select(QuizQuestion).where(QuizQuestion.quiz_id == quiz_id).order_by(QuizQuestion.order_index)
    )
    return list(result.scalars().all())


async def replace_questions(db: AsyncSession, quiz_id: str, questions: list[Mapping]) -> int:
    await db.execute(delete(QuizQuestion).where(QuizQuestion.quiz_id == quiz_id))
    rows = build_question_rows(quiz_id, questions)
    db.add_all(rows)
    return len(rows)


async def delete_quiz(db: AsyncSession, quiz: Quiz) -> None:
    await db.execute(delete(QuizAttempt).where(QuizAttempt.quiz_id == quiz.id))
    await db.execute(delete(QuizQuestion).where(QuizQuestion.quiz_id == quiz.id))
    await db.delete(quiz)


async def count_by_quiz(db: AsyncSession, column, quiz_ids: list[str]) -> dict[str, int]:
    if not quiz_ids:
        return {}
    result = await db.execute(select(column, func.count()).where(column.in_(quiz_ids)).group_by(column))
    return {quiz_id: count for quiz_id, count in result.all()}


async def quiz_detail(db: AsyncSession, quiz: Quiz) -> QuizDetail:
    questions = await fetch_questions(db, quiz.id)
    return QuizDetail(
        **QuizRead.model_validate(quiz).model_dump(),
        questions=[QuizQuestionRead.model_validate(q) for q in questions],
    )


async def quiz_public(db: AsyncSession, quiz: Quiz) -> QuizPublic:
    questions = await fetch_questions(db, quiz.id)
    return QuizPublic(
        **QuizRead.model_validate(quiz).model_dump(),
        questions=[QuizQuestionPublic.model_validate(q) for q in questions],
    )
