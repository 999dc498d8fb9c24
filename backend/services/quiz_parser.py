"""Parse, normalize and validate AI quiz output, then convert it for the quiz editor."""
import json
import logging
import re
import uuid
from typing import Any

from prompts.quiz import suggested_duration
from schemas.quiz import QuizGenerationRequest
from services.sanitizer import render_markup

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*|\s*```")
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")
MISSING_OBJECT_COMMA_PATTERN = re.compile(r"}(\s*){")

DEFAULT_PASSING_SCORE = 70


def extract_json_content(content: str) -> str | None:
    """Strip markdown fences and surrounding prose, keeping the outermost JSON value."""
    clean = CODE_FENCE_PATTERN.sub("", content.strip())
    starts = [i for i in (clean.find("{"), clean.find("[")) if i != -1]
    if not starts:
        logger.error("No JSON structure found in response: %s", clean[:200])
        return None
    start = min(starts)
    closer = "}" if clean[start] == "{" else "]"
    end = clean.rfind(closer)
    if end <= start:
        # Truncated output; fix_common_json_issues closes what is left open.
        logger.warning("Response appears to be truncated (no closing %s)", closer)
        return clean[start:]
    return clean[start:end + 1]


def _close_open_structures(text: str) -> str:
    stack = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in "{[":
            stack.append("}" if char == "{" else "]")
        elif char in "}]" and stack and stack[-1] == char:
            stack.pop()

    if in_string:
        text += '"'
    if stack:
        logger.warning("Closing %d unterminated JSON structures", len(stack))
        text = TRAILING_COMMA_PATTERN.sub(r"\1", text.rstrip().rstrip(",")) + "".join(reversed(stack))
    return text


def fix_common_json_issues(text: str) -> str:
    fixed = MISSING_OBJECT_COMMA_PATTERN.sub(r"},\1{", text)
    fixed = _close_open_structures(fixed)
    return TRAILING_COMMA_PATTERN.sub(r"\1", fixed)


def safe_parse(text: str) -> Any | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        start = max(0, e.pos - 100)
        logger.error("Failed to parse JSON at position %d: %s | context: %s", e.pos, e.msg, text[start:e.pos + 100])
        return None


def _default_description(request: QuizGenerationRequest) -> str:
    return f"A {request.difficulty} level quiz about {request.topic}"


def normalize_quiz_structure(raw: Any, request: QuizGenerationRequest) -> dict | None:
    """Accept the response shapes models actually produce and return {title, description, questions, ...}."""
    if isinstance(raw, list):
        quiz = {"title": request.topic, "description": _default_description(request), "questions": raw}
    elif not isinstance(raw, dict):
        logger.error("Invalid quiz structure of type %s", type(raw).__name__)
        return None
    elif raw.get("quiz_title") and raw.get("questions") is not None:
        quiz = {
            "title": raw["quiz_title"],
            "description": raw.get("quiz_description") or "",
            "questions": raw["questions"],
        }
    elif isinstance(raw.get("quiz"), list):
        quiz = {"title": request.topic, "description": _default_description(request), "questions": raw["quiz"]}
    elif raw.get("title") and raw.get("questions") is not None:
        quiz = dict(raw)
    elif raw.get("questions") is not None:
        quiz = dict(raw, title=request.topic, description=raw.get("description") or _default_description(request))
    else:
        logger.error("Invalid quiz structure, cannot determine format. Keys: %s", list(raw))
        return None

    if not isinstance(quiz["questions"], list):
        logger.error("Quiz questions is not a list")
        return None

    questions = []
    for q in quiz["questions"]:
        if not isinstance(q, dict):
            logger.error("Question entry is not an object: %r", q)
            return None
        questions.append({
            **q,
            "question": q.get("question") or q.get("question_text") or q.get("text"),
            "question_type": "multiple_choice" if q.get("question_type") == "single_choice" else q.get("question_type"),
            "options": q.get("options") or [],
            "correct_answer": q.get("correct_answer"),
            "correct_answer_text": q.get("correct_answer_text"),
            "explanation": q.get("explanation"),
        })
    quiz["questions"] = questions
    return quiz


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_question_type(q: dict, number: int) -> bool:
    """Check per-type requirements, fixing the ones that have an obvious canonical form."""
    question_type = q["question_type"]
    options = q["options"]

    if question_type == "multiple_choice":
        if not isinstance(options, list) or len(options) < 2:
            logger.error("Question %d multiple choice needs options", number)
            return False
        if not _is_index(q["correct_answer"]) or not 0 <= q["correct_answer"] < len(options):
            logger.error("Question %d has invalid correct_answer", number)
            return False
    elif question_type == "true_false":
        if not isinstance(options, list) or len(options) != 2:
            q["options"] = ["True", "False"]
        if not _is_index(q["correct_answer"]) or q["correct_answer"] not in (0, 1):
            logger.error("Question %d true/false has invalid correct_answer", number)
            return False
    elif question_type in ("fill_blank", "essay"):
        if not isinstance(q.get("correct_answer_text"), str) or not q["correct_answer_text"].strip():
            # Some models put the text answer in correct_answer instead.
            if isinstance(q["correct_answer"], str) and q["correct_answer"].strip():
                q["correct_answer_text"] = q["correct_answer"]
            else:
                logger.error("Question %d %s needs correct_answer_text", number, question_type)
                return False
        q["options"] = []
        q["correct_answer"] = 0
    elif question_type == "matching":
        if not isinstance(options, list) or not all(
            isinstance(opt, dict) and opt.get("left") and opt.get("right") for opt in options
        ):
            logger.error("Question %d matching needs options with left/right pairs", number)
            return False
        if not isinstance(q["correct_answer"], list):
            logger.error("Question %d matching needs correct_answer as array", number)
            return False
    elif question_type == "ordering":
        if not isinstance(options, list) or len(options) < 2:
            logger.error("Question %d ordering needs array of items to order", number)
            return False
        if not isinstance(q["correct_answer"], list):
            logger.error("Question %d ordering needs correct_answer as array of indices", number)
            return False
    else:
        logger.error("Question %d has unsupported question type: %s", number, question_type)
        return False
    return True


def validate_questions(questions: list[dict], request: QuizGenerationRequest) -> bool:
    for number, q in enumerate(questions, start=1):
        if not q.get("question") or not q.get("question_type"):
            logger.error("Question %d missing required fields", number)
            return False
        if q["question_type"] not in request.question_types:
            logger.error(
                "Question %d has invalid question type: %s. Only allowed: %s",
                number, q["question_type"], ", ".join(request.question_types),
            )
            return False
        if not validate_question_type(q, number):
            return False
    return True


def parse_ai_response(content: Any, request: QuizGenerationRequest) -> dict | None:
    """Turn a tool input dict or a raw text reply into a validated quiz dict, or None."""
    if content is None:
        return None
    if isinstance(content, str):
        extracted = extract_json_content(content)
        if extracted is None:
            return None
        content = safe_parse(fix_common_json_issues(extracted))
        if content is None:
            return None

    quiz = normalize_quiz_structure(content, request)
    if quiz is None or not quiz.get("title"):
        return None
    if not quiz["questions"]:
        logger.error("Quiz contains no questions")
        return None
    if len(quiz["questions"]) != request.question_count:
        logger.warning(
            "Question count mismatch: expected %d, got %d", request.question_count, len(quiz["questions"])
        )
    if not validate_questions(quiz["questions"], request):
        return None

    quiz["difficulty"] = quiz.get("difficulty") or request.difficulty
    quiz["category"] = quiz.get("category") or request.subject
    return quiz


def _process_correct_answer(question: dict) -> tuple[Any, str | None]:
    question_type = question["question_type"]
    answer = question.get("correct_answer")
    if question_type in ("multiple_choice", "true_false"):
        return (answer if _is_index(answer) else 0), None
    if question_type in ("fill_blank", "essay"):
        text = question.get("correct_answer_text") or (answer if isinstance(answer, str) else "")
        return 0, text
    if question_type in ("matching", "ordering"):
        return (answer if isinstance(answer, list) else [0]), None
    return 0, None


def convert_to_frontend_format(quiz: dict, request: QuizGenerationRequest) -> dict:
    """Shape a parsed quiz the way the quiz editor form expects it."""
    questions = []
    for index, q in enumerate(quiz["questions"]):
        correct_answer, correct_answer_text = _process_correct_answer(q)
        explanation = q.get("explanation") or ""
        questions.append({
            "id": f"temp_{uuid.uuid4()}",
            "question": q["question"],
            "question_type": q["question_type"],
            "options": q.get("options") or [],
            "correct_answer": correct_answer,
            "correct_answer_text": correct_answer_text,
            "explanation": explanation,
            "explanation_html": render_markup(explanation),
            "points": q.get("points") or 1,
            "order_index": index,
            "difficulty_level": q.get("difficulty_level") or "medium",
            "time_limit_seconds": q.get("time_limit_seconds"),
            "tags": q.get("tags") or [],
        })

    return {
        "title": quiz.get("title") or f"Quiz: {request.topic}",
        "description": quiz.get("description") or f"Test your knowledge of {request.topic}",
        "category": quiz.get("category") or request.subject,
        "difficulty": request.difficulty,
        "duration_minutes": quiz.get("duration_minutes") or suggested_duration(request.question_count),
        "image_url": "",
        "is_published": False,
        "passing_score": DEFAULT_PASSING_SCORE,
        "max_attempts": 0,
        "questions": questions,
    }
