from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Difficulty = Literal["beginner", "intermediate", "advanced"]
QuestionType = Literal["multiple_choice", "true_false", "fill_blank", "essay", "matching", "ordering"]

DIFFICULTIES = ("beginner", "intermediate", "advanced")
GENERATED_QUESTION_TYPES = ("multiple_choice", "true_false", "fill_blank", "essay", "matching", "ordering")

DEFAULT_SUBJECT = "General Knowledge"
DEFAULT_QUESTION_COUNT = 5
DEFAULT_DIFFICULTY = "intermediate"
DEFAULT_QUESTION_TYPES = ("multiple_choice", "true_false")
DEFAULT_LANGUAGE = "english"
LANGUAGES = ("english", "khmer")


class QuizGenerationRequest(BaseModel):
    """Input for AI quiz generation. Only `topic` is required; everything else has a default."""

    topic: str
    subject: str = DEFAULT_SUBJECT
    question_count: int = Field(default=DEFAULT_QUESTION_COUNT, ge=1, le=50)
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    question_types: list[QuestionType] = Field(default_factory=lambda: list(DEFAULT_QUESTION_TYPES))
    language: str = DEFAULT_LANGUAGE
    explanation_language: str = DEFAULT_LANGUAGE
    custom_prompt: str | None = None
    include_debug_info: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        # null, "" and [] mean "use the default", the same as an absent key.
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            if isinstance(value, list) and not value:
                continue
            cleaned[key] = value
        return cleaned
