"""Claude API wrapper using tool use for structured quiz output."""
import logging

import anthropic

from config import settings

logger = logging.getLogger(__name__)

QUIZ_TOOL = {
    "name": "submit_quiz",
    "description": "Submit the generated quiz with all of its questions.",
    "input_schema": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Short quiz title."},
            "description": {"type": "string", "description": "One-sentence quiz description."},
            "category": {"type": "string", "description": "Subject the quiz belongs to."},
            "difficulty": {
                "type": "string",
                "enum": ["beginner", "intermediate", "advanced"],
            },
            "duration_minutes": {"type": "integer", "description": "Suggested time limit in minutes."},
            "questions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "question": {"type": "string"},
                        "question_type": {
                            "type": "string",
                            "enum": ["multiple_choice", "true_false", "fill_blank", "essay", "matching", "ordering"],
                        },
                        "options": {
                            "type": "array",
                            "description": (
                                "Answer options. Strings for multiple_choice, true_false and ordering; "
                                "objects with 'left' and 'right' for matching; empty for fill_blank and essay."
                            ),
                        },
                        "correct_answer": {
                            "description": (
                                "Option index for multiple_choice and true_false (0 = True), "
                                "0 for fill_blank and essay, array of indices for matching and ordering."
                            ),
                        },
                        "correct_answer_text": {
                            "type": "string",
                            "description": "Expected answer for fill_blank, sample answer for essay.",
                        },
                        "explanation": {
                            "type": "string",
                            "description": "Why the answer is correct. May use **bold** and *italic*.",
                        },
                    },
                    "required": ["question", "question_type", "options", "correct_answer", "explanation"],
                },
            },
        },
        "required": ["title", "questions"],
    },
}


def _get_client() -> anthropic.AsyncAnthropic:
    if not settings.ANTHROPIC_API_KEY:
        raise RuntimeError("ANTHROPIC_API_KEY is not configured")
    return anthropic.AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)


async def request_quiz(
    system_prompt: str,
    prompt: str,
    max_tokens: int = 8000,
    temperature: float = 0.7,
) -> dict | str | None:
    """Ask Claude for a quiz.

    Returns the submit_quiz tool input, or the reply text when the model
    answered without the tool, or None when the reply was empty. API errors
    propagate to the caller.
    """
    client = _get_client()
    response = await client.messages.create(
        model=settings.ANTHROPIC_MODEL,
        max_tokens=max_tokens,
        temperature=temperature,
        system=system_prompt,
        tools=[QUIZ_TOOL],
        tool_choice={"type": "tool", "name": "submit_quiz"},
        messages=[{"role": "user", "content": prompt}],
    )

    text_parts = []
    for block in response.content:
        if block.type == "tool_use" and block.name == "submit_quiz":
            return block.input
        if block.type == "text":
            text_parts.append(block.text)

    logger.warning("No tool use block in quiz response (stop_reason=%s)", response.stop_reason)
    return "\n".join(text_parts) or None


async def ping() -> bool:
    """Cheap call used to verify the API key and model name."""
    client = _get_client()
    response = await client.messages.create(
        model=settings.ANTHROPIC_MODEL,
        max_tokens=16,
        messages=[{"role": "user", "content": "Reply with OK."}],
    )
    return bool(response.content)
