"""AI quiz generation: prompt, call Claude with retries, parse, convert."""
import asyncio
import logging

from prompts.quiz import build_content_prompt, build_system_prompt
from schemas.quiz import QuizGenerationRequest
from services import claude
from services.quiz_parser import convert_to_frontend_format, parse_ai_response

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
# Output budget grows on each retry; unparseable replies are usually truncated.
TOKEN_LIMITS = (8000, 12000, 16000)
FIRST_ATTEMPT_TEMPERATURE = 0.7
RETRY_TEMPERATURE = 0.5
RETRY_DELAY_SECONDS = 1.0


class QuizGenerator:
    def __init__(self, request_fn=None, retry_delay: float = RETRY_DELAY_SECONDS):
        self._request = request_fn or claude.request_quiz
        self.retry_delay = retry_delay

    async def generate_quiz(self, request: QuizGenerationRequest) -> dict:
        """Generate a quiz for `request`.

        Returns {"success": True, "quiz": ..., "debugInfo": ...} or
        {"success": False, "error": ...}. Failures from the model are reported,
        not raised.
        """
        logger.info(
            "Quiz generation started: topic=%r subject=%r count=%d",
            request.topic, request.subject, request.question_count,
        )
        system_prompt = build_system_prompt(request)
        prompt = build_content_prompt(request)

        raw = None
        quiz = None
        last_error = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            max_tokens = TOKEN_LIMITS[attempt - 1]
            temperature = FIRST_ATTEMPT_TEMPERATURE if attempt == 1 else RETRY_TEMPERATURE
            logger.info("AI generation attempt %d/%d (max_tokens=%d)", attempt, MAX_ATTEMPTS, max_tokens)
            try:
                raw = await self._request(system_prompt, prompt, max_tokens=max_tokens, temperature=temperature)
            except Exception as e:
                logger.error("Claude quiz API error (attempt %d): %s", attempt, e)
                last_error = str(e) or type(e).__name__
                raw = None
            else:
                quiz = parse_ai_response(raw, request)
                if quiz is not None:
                    logger.info("Valid quiz parsed on attempt %d", attempt)
                    break
                last_error = "Failed to parse AI response into valid quiz format"
                logger.warning("Attempt %d produced unparseable content, retrying", attempt)

            if attempt < MAX_ATTEMPTS and self.retry_delay:
                await asyncio.sleep(self.retry_delay)

        if quiz is None:
            logger.error("Quiz generation failed after %d attempts: %s", MAX_ATTEMPTS, last_error)
            return {
                "success": False,
                "error": last_error or "AI service failed to generate content after multiple attempts. Please try again.",
            }

        frontend_quiz = convert_to_frontend_format(quiz, request)
        logger.info(
            "Quiz generation successful: %d questions, title=%r",
            len(frontend_quiz["questions"]), frontend_quiz["title"],
        )
        return {
            "success": True,
            "quiz": frontend_quiz,
            "debugInfo": {"prompt": prompt, "systemPrompt": system_prompt, "rawResponse": raw},
        }

    async def test_connection(self) -> dict:
        try:
            await claude.ping()
        except Exception as e:
            logger.error("AI connection test failed: %s", e)
            return {"success": False, "error": f"Connection failed: {e}"}
        return {"success": True}


quiz_generator = QuizGenerator()


def get_quiz_generator() -> QuizGenerator:
    return quiz_generator
