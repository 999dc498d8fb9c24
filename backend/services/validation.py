"""Quiz validation and normalization of heterogeneous validation errors.

Older code paths produced errors as bare strings, loose dicts without a
severity, or pydantic error entries. Everything here is converted into one
ValidationIssue shape so the admin UI can render a single list.
"""
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from schemas.validation import QuizValidationResult, ValidationIssue

logger = logging.getLogger(__name__)

QUESTION_TYPES = (
    "multiple_choice",
    "single_choice",
    "true_false",
    "fill_blank",
    "essay",
    "matching",
    "ordering",
)
DIFFICULTY_LEVELS = ("easy", "medium", "hard")

MAX_TOTAL_POINTS = 100
MAX_QUESTIONS = 50
MIN_QUESTION_LENGTH = 10


def normalize_question_type(question_type: str | None) -> str | None:
    return "multiple_choice" if question_type == "single_choice" else question_type


def is_valid_question_type(value: Any) -> bool:
    return value in QUESTION_TYPES


def is_valid_difficulty_level(value: Any) -> bool:
    return value in DIFFICULTY_LEVELS


def migrate_validation_error(error: Any, severity: str = "error") -> ValidationIssue:
    """Convert any legacy error shape into a ValidationIssue.

    A severity already present on the error wins over the `severity` default.
    """
    if isinstance(error, ValidationIssue):
        return error
    if isinstance(error, str):
        return ValidationIssue(field="unknown", message=error or "Validation failed", severity=severity)
    if not isinstance(error, Mapping):
        error = vars(error) if hasattr(error, "__dict__") else {}

    question_index = error.get("questionIndex")
    if question_index is None:
        question_index = error.get("question_index")

    field = error.get("field")
    if not field and error.get("loc"):
        # pydantic error entries carry loc/msg/type instead of field/message/code.
        field = ".".join(str(part) for part in error["loc"])

    existing = error.get("severity")
    return ValidationIssue(
        field=field or "unknown",
        message=error.get("message") or error.get("msg") or "Validation failed",
        severity=existing if existing in ("error", "warning") else severity,
        code=error.get("code") or error.get("type"),
        question_index=question_index,
        suggestion=error.get("suggestion"),
    )


def from_pydantic_errors(exc: ValidationError) -> list[ValidationIssue]:
    issues = []
    for entry in exc.errors():
        field = ".".join(str(part) for part in entry.get("loc", ())) or "unknown"
        issues.append(
            ValidationIssue(field=field, message=entry.get("msg", "Validation failed"), code=entry.get("type"))
        )
    return issues


def _error(field: str, message: str, code: str | None = None) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, severity="error", code=code)


def _warning(field: str, message: str, suggestion: str | None = None) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, severity="warning", suggestion=suggestion)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _answer_json(question: Mapping) -> Any:
    """Matching/ordering answers live in correct_answer_json, or in correct_answer as a list."""
    value = question.get("correct_answer_json")
    if value is None and isinstance(question.get("correct_answer"), list):
        value = question.get("correct_answer")
    return value


def _validate_choice(question: Mapping) -> list[ValidationIssue]:
    issues = []
    options = question.get("options")
    if not isinstance(options, list) or len(options) < 2:
        issues.append(_error("options", "At least 2 options are required", "MIN_OPTIONS"))
        options = options if isinstance(options, list) else []
    elif any(not _text(opt) for opt in options):
        issues.append(_error("options", "Options cannot be empty", "EMPTY_OPTION"))
    else:
        normalized = [_text(opt).lower() for opt in options]
        if len(set(normalized)) != len(normalized):
            issues.append(_warning("options", "Some options are duplicates", "Make every option distinct"))

    answer = question.get("correct_answer")
    if answer is None or answer == "":
        issues.append(_error("correct_answer", "Please select the correct answer", "ANSWER_REQUIRED"))
    elif isinstance(answer, int) and not isinstance(answer, bool) and options and not 0 <= answer < len(options):
        issues.append(_error("correct_answer", "Correct answer index is out of range", "ANSWER_OUT_OF_RANGE"))
    return issues


def _validate_true_false(question: Mapping) -> list[ValidationIssue]:
    answer = question.get("correct_answer")
    if isinstance(answer, bool) or answer not in (0, 1):
        return [_error("correct_answer", "Please select True or False as the correct answer", "TRUE_FALSE_ANSWER")]
    return []


def _validate_fill_blank(question: Mapping) -> list[ValidationIssue]:
    issues = []
    if not _text(question.get("correct_answer_text")):
        issues.append(_error("correct_answer_text", "Please provide the correct answer text", "BLANK_ANSWER_REQUIRED"))
    if "___" not in (question.get("question") or ""):
        issues.append(
            _warning(
                "question",
                "Consider adding underscores (___) to indicate where students should fill in the blank",
                "Use _____ to show students exactly where to type their answer",
            )
        )
    return issues


def _validate_essay(question: Mapping) -> list[ValidationIssue]:
    if not _text(question.get("correct_answer_text")):
        return [
            _warning(
                "correct_answer_text",
                "Consider providing sample answer or grading criteria",
                "This helps ensure consistent grading",
            )
        ]
    return []


def _validate_matching(question: Mapping) -> list[ValidationIssue]:
    issues = []
    options = question.get("options")
    if not isinstance(options, list) or not options:
        issues.append(_error("options", "Matching pairs are required", "PAIRS_REQUIRED"))
    elif not all(isinstance(opt, Mapping) and opt.get("left") and opt.get("right") for opt in options):
        issues.append(_error("options", "Every matching pair needs a left and right side", "INVALID_PAIR"))

    answer = _answer_json(question)
    if not answer:
        issues.append(_error("correct_answer_json", "Please set the correct matching pairs", "MATCHING_ANSWER"))
    return issues


def _validate_ordering(question: Mapping) -> list[ValidationIssue]:
    issues = []
    options = question.get("options")
    if not isinstance(options, list) or len(options) < 2:
        issues.append(_error("options", "At least 2 items are required for ordering", "MIN_ITEMS"))
        options = options if isinstance(options, list) else []

    answer = _answer_json(question)
    if not isinstance(answer, list) or not answer:
        issues.append(_error("correct_answer_json", "Please set the correct order of items", "ORDER_REQUIRED"))
    elif len(answer) != len(options):
        issues.append(
            _error("correct_answer_json", "Correct order must include all available options", "ORDER_INCOMPLETE")
        )
    return issues


_TYPE_VALIDATORS = {
    "multiple_choice": _validate_choice,
    "true_false": _validate_true_false,
    "fill_blank": _validate_fill_blank,
    "essay": _validate_essay,
    "matching": _validate_matching,
    "ordering": _validate_ordering,
}


def validate_question(question: Mapping) -> list[ValidationIssue]:
    """Return every error and warning for a single question."""
    issues = []
    text = _text(question.get("question"))
    if not text:
        issues.append(_error("question", "Question text is required", "QUESTION_REQUIRED"))
    elif len(text) < MIN_QUESTION_LENGTH:
        issues.append(_warning("question", "Question text is very short", "Add more context for students"))

    points = question.get("points")
    if points is not None and (not isinstance(points, (int, float)) or points <= 0):
        issues.append(_error("points", "Points must be positive", "INVALID_POINTS"))

    question_type = question.get("question_type")
    if not question_type:
        issues.append(_error("question_type", "Question type is required", "TYPE_REQUIRED"))
        return issues

    validator = _TYPE_VALIDATORS.get(normalize_question_type(question_type))
    if validator is None:
        issues.append(_error("question_type", f"Unsupported question type: {question_type}", "UNSUPPORTED_TYPE"))
        return issues

    issues.extend(validator(question))
    return issues


def _quiz_level_warnings(questions: list[Mapping]) -> list[ValidationIssue]:
    warnings = []
    texts = [_text(q.get("question")).lower() for q in questions]
    texts = [t for t in texts if t]
    if len(set(texts)) != len(texts):
        warnings.append(
            _warning("questions", "Some questions appear to be duplicates", "Review questions for potential duplicates")
        )

    types = {normalize_question_type(q.get("question_type")) for q in questions if q.get("question_type")}
    if len(types) == 1 and len(questions) > 5:
        warnings.append(
            _warning(
                "questions",
                "Quiz uses only one question type",
                "Consider adding variety with different question types",
            )
        )

    total_points = 0
    for q in questions:
        points = q.get("points")
        total_points += points if isinstance(points, (int, float)) and points > 0 else 1
    if total_points > MAX_TOTAL_POINTS:
        warnings.append(
            _warning(
                "questions",
                f"Total quiz points exceed {MAX_TOTAL_POINTS}",
                "Consider if this point total is appropriate for your grading scale",
            )
        )

    if len(questions) > MAX_QUESTIONS:
        warnings.append(
            _warning("questions", "Quiz is quite long", "Consider breaking into multiple shorter quizzes")
        )
    return warnings


def validate_quiz(data: Mapping) -> QuizValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    if not _text(data.get("title")):
        errors.append(_error("title", "Quiz title is required", "TITLE_REQUIRED"))
    if not _text(data.get("description")):
        errors.append(_error("description", "Quiz description is required", "DESCRIPTION_REQUIRED"))

    questions = data.get("questions") or []
    if not questions:
        errors.append(_error("questions", "Quiz must have at least one question", "NO_QUESTIONS"))
        return QuizValidationResult(is_valid=False, errors=errors, warnings=warnings)

    for index, question in enumerate(questions):
        if not isinstance(question, Mapping):
            errors.append(
                ValidationIssue(field="question", message="Question must be an object", question_index=index)
            )
            continue
        for issue in validate_question(question):
            issue = issue.model_copy(update={"question_index": index})
            (errors if issue.severity == "error" else warnings).append(issue)

    warnings.extend(_quiz_level_warnings([q for q in questions if isinstance(q, Mapping)]))

    logger.debug("Validated quiz with %d errors and %d warnings", len(errors), len(warnings))
    return QuizValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
