import json

import pytest

from schemas.quiz import QuizGenerationRequest
from services.quiz_parser import (
    convert_to_frontend_format,
    extract_json_content,
    fix_common_json_issues,
    normalize_quiz_structure,
    parse_ai_response,
    safe_parse,
)


@pytest.fixture
def request_two():
    return QuizGenerationRequest(topic="Photosynthesis", subject="Biology", question_count=2)


def _questions():
    return [
        {
            "question": "What do plants produce during photosynthesis?",
            "question_type": "multiple_choice",
            "options": ["Oxygen", "Nitrogen", "Helium", "Argon"],
            "correct_answer": 0,
            "explanation": "**Oxygen** is released as a by-product.",
        },
        {
            "question": "Photosynthesis needs sunlight.",
            "question_type": "true_false",
            "options": [],
            "correct_answer": 0,
            "explanation": "Light drives the reaction.",
        },
    ]


class TestJsonRepair:
    def test_strips_code_fences(self):
        assert extract_json_content('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_surrounding_prose(self):
        assert extract_json_content('Here is your quiz: {"title": "x"} Enjoy!') == '{"title": "x"}'

    def test_no_json(self):
        assert extract_json_content("Sorry, I cannot help with that.") is None

    def test_trailing_commas(self):
        assert json.loads(fix_common_json_issues('{"a": [1, 2,], }')) == {"a": [1, 2]}

    def test_missing_comma_between_objects(self):
        assert json.loads(fix_common_json_issues('[{"a": 1} {"b": 2}]')) == [{"a": 1}, {"b": 2}]

    def test_truncated_output_is_closed(self):
        text = '{"title": "T", "questions": [{"question": "Q1"}, {"question": "Q2'
        repaired = fix_common_json_issues(extract_json_content(text))
        assert json.loads(repaired) == {"title": "T", "questions": [{"question": "Q1"}]}

    def test_braces_inside_strings_are_ignored(self):
        text = '{"question": "Use {x} here", "items": [1'
        assert json.loads(fix_common_json_issues(text)) == {"question": "Use {x} here", "items": [1]}

    def test_safe_parse_returns_none_on_garbage(self):
        assert safe_parse("{not json") is None


class TestNormalize:
    def test_bare_array_uses_topic(self, request_two):
        quiz = normalize_quiz_structure(_questions(), request_two)
        assert quiz["title"] == "Photosynthesis"
        assert len(quiz["questions"]) == 2

    def test_quiz_title_shape(self, request_two):
        quiz = normalize_quiz_structure({"quiz_title": "Plants", "questions": _questions()}, request_two)
        assert quiz["title"] == "Plants"
        assert quiz["description"] == ""

    def test_quiz_key_shape(self, request_two):
        quiz = normalize_quiz_structure({"quiz": _questions()}, request_two)
        assert quiz["title"] == "Photosynthesis"
        assert quiz["description"] == "A intermediate level quiz about Photosynthesis"

    def test_question_text_aliases_and_single_choice(self, request_two):
        raw = {"title": "T", "questions": [{"question_text": "Q?", "question_type": "single_choice"}]}
        question = normalize_quiz_structure(raw, request_two)["questions"][0]
        assert question["question"] == "Q?"
        assert question["question_type"] == "multiple_choice"
        assert question["options"] == []

    def test_unknown_shape(self, request_two):
        assert normalize_quiz_structure({"items": []}, request_two) is None
        assert normalize_quiz_structure("text", request_two) is None


class TestParseAiResponse:
    def test_tool_input_dict(self, request_two):
        quiz = parse_ai_response({"title": "Plants", "questions": _questions()}, request_two)
        assert quiz["title"] == "Plants"
        assert quiz["questions"][1]["options"] == ["True", "False"]
        assert quiz["difficulty"] == "intermediate"
        assert quiz["category"] == "Biology"
        assert "duration_minutes" not in quiz

    def test_text_reply(self, request_two):
        text = "```json\n" + json.dumps({"title": "Plants", "questions": _questions()}) + "\n```"
        assert parse_ai_response(text, request_two)["title"] == "Plants"

    def test_rejects_unrequested_type(self, request_two):
        questions = _questions()
        questions[0]["question_type"] = "essay"
        questions[0]["correct_answer_text"] = "Oxygen"
        assert parse_ai_response({"title": "T", "questions": questions}, request_two) is None

    def test_rejects_out_of_range_answer(self, request_two):
        questions = _questions()
        questions[0]["correct_answer"] = 7
        assert parse_ai_response({"title": "T", "questions": questions}, request_two) is None

    def test_fill_blank_answer_moved_to_text(self):
        request = QuizGenerationRequest(topic="Geography", question_count=1, question_types=["fill_blank"])
        raw = {"title": "T", "questions": [
            {"question": "The capital of France is ___.", "question_type": "fill_blank", "correct_answer": "Paris"},
        ]}
        question = parse_ai_response(raw, request)["questions"][0]
        assert question["correct_answer_text"] == "Paris"
        assert question["correct_answer"] == 0

    def test_empty_and_missing(self, request_two):
        assert parse_ai_response(None, request_two) is None
        assert parse_ai_response({"title": "T", "questions": []}, request_two) is None
        assert parse_ai_response("no json here", request_two) is None


def test_convert_to_frontend_format(request_two):
    quiz = parse_ai_response({"title": "Plants", "questions": _questions()}, request_two)
    converted = convert_to_frontend_format(quiz, request_two)

    assert converted["title"] == "Plants"
    assert converted["passing_score"] == 70
    assert converted["is_published"] is False
    assert converted["max_attempts"] == 0
    assert converted["duration_minutes"] == 15
    first, second = converted["questions"]
    assert first["id"].startswith("temp_")
    assert first["id"] != second["id"]
    assert first["explanation_html"] == "<strong>Oxygen</strong> is released as a by-product."
    assert first["points"] == 1
    assert [q["order_index"] for q in converted["questions"]] == [0, 1]
    assert second["correct_answer_text"] is None


def test_convert_defaults_when_quiz_is_sparse(request_two):
    quiz = {"questions": [{"question": "Q?", "question_type": "ordering", "correct_answer": "bad"}]}
    converted = convert_to_frontend_format(quiz, request_two)
    assert converted["title"] == "Quiz: Photosynthesis"
    assert converted["description"] == "Test your knowledge of Photosynthesis"
    assert converted["duration_minutes"] == 15
    assert converted["questions"][0]["correct_answer"] == [0]


def test_duration_falls_back_to_suggested_minimum():
    request = QuizGenerationRequest(topic="Photosynthesis", question_count=5)
    questions = _questions() * 3
    quiz = parse_ai_response({"title": "Plants", "questions": questions[:5]}, request)
    assert convert_to_frontend_format(quiz, request)["duration_minutes"] == 15


def test_model_supplied_duration_is_kept(request_two):
    quiz = parse_ai_response({"title": "Plants", "duration_minutes": 25, "questions": _questions()}, request_two)
    assert convert_to_frontend_format(quiz, request_two)["duration_minutes"] == 25
