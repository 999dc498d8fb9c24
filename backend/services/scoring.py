"""Server-side grading of quiz attempts.

Answers are keyed by question id. Essay questions need manual grading and
never count as correct here.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

from services.sanitizer import render_markup

logger = logging.getLogger(__name__)

CHOICE_TYPES = ("multiple_choice", "single_choice", "true_false")
LIST_TYPES = ("matching", "ordering")


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def grade_answer(question, answer: Any) -> bool:
    question_type = question.question_type
    if question_type in CHOICE_TYPES:
        return _is_index(answer) and answer == question.correct_answer
    if question_type == "fill_blank":
        expected = str(question.correct_answer_text or "").strip().lower()
        return bool(expected) and str(answer or "").strip().lower() == expected
    if question_type in LIST_TYPES:
        return isinstance(answer, list) and answer == question.correct_answer
    return False


def correct_answer_display(question) -> str:
    question_type = question.question_type
    answer = question.correct_answer
    if question_type == "true_false":
        return "True" if answer == 0 else "False"
    if question_type in CHOICE_TYPES:
        options = question.options or []
        if _is_index(answer) and 0 <= answer < len(options):
            return str(options[answer])
        return str(answer)
    if question_type in ("fill_blank", "essay"):
        return question.correct_answer_text or ""
    return str(answer)


@dataclass
class AttemptScore:
    score: int = 0
    total_points: int = 0
    total_questions: int = 0
    correct_answers: int = 0
    percentage_score: float = 0.0
    passed: bool = False
    results: list[dict] = field(default_factory=list)


def score_attempt(questions, answers: dict, passing_score: int | None) -> AttemptScore:
    outcome = AttemptScore(total_questions=len(questions))
    for question in questions:
        points = question.points or 1
        outcome.total_points += points
        answer = answers.get(question.id)
        correct = grade_answer(question, answer)
        if correct:
            outcome.score += points
            outcome.correct_answers += 1
        outcome.results.append({
            "question_id": question.id,
            "question": question.question,
            "user_answer": answer if answer is not None else "No answer",
            "correct_answer": correct_answer_display(question),
            "is_correct": correct,
            "explanation": question.explanation,
            "explanation_html": render_markup(question.explanation),
        })

    if outcome.total_points:
        outcome.percentage_score = round(outcome.score / outcome.total_points * 100, 2)
    # A quiz without a passing score cannot be failed.
    outcome.passed = outcome.percentage_score >= passing_score if passing_score else True
    logger.debug(
        "Scored attempt: %d/%d points (%.2f%%)", outcome.score, outcome.total_points, outcome.percentage_score
    )
    return outcome
