"""Quiz generation prompts for Claude."""
import logging

from schemas.quiz import QuizGenerationRequest

logger = logging.getLogger(__name__)

QUESTION_TYPE_EXAMPLES = {
    "multiple_choice": """{
      "question": "What is the process by which plants make food?",
      "question_type": "multiple_choice",
      "options": ["Photosynthesis", "Respiration", "Transpiration", "Germination"],
      "correct_answer": 0,
      "explanation": "Photosynthesis is the process where plants use sunlight, water, and carbon dioxide to produce glucose and oxygen."
    }""",
    "true_false": """{
      "question": "The sun is a star.",
      "question_type": "true_false",
      "options": ["True", "False"],
      "correct_answer": 0,
      "explanation": "The sun is classified as a star, specifically a yellow dwarf."
    }""",
    "fill_blank": """{
      "question": "The capital of France is ____.",
      "question_type": "fill_blank",
      "options": [],
      "correct_answer": 0,
      "correct_answer_text": "Paris",
      "explanation": "Paris has been the capital of France since the 12th century."
    }""",
    "essay": """{
      "question": "Explain the importance of biodiversity in ecosystems.",
      "question_type": "essay",
      "options": [],
      "correct_answer": 0,
      "correct_answer_text": "Biodiversity ensures ecosystem stability, supports food webs, and increases resilience to change.",
      "explanation": "A complete answer covers stability, food web complexity, and adaptation benefits."
    }""",
    "matching": """{
      "question": "Match each planet with its characteristic:",
      "question_type": "matching",
      "options": [
        {"left": "Mars", "right": "Red planet"},
        {"left": "Jupiter", "right": "Largest planet"},
        {"left": "Saturn", "right": "Has rings"}
      ],
      "correct_answer": [0, 1, 2],
      "explanation": "Mars is red due to iron oxide, Jupiter is the largest planet, and Saturn is known for its rings."
    }""",
    "ordering": """{
      "question": "Put these events in chronological order:",
      "question_type": "ordering",
      "options": ["World War I", "Industrial Revolution", "Renaissance", "World War II"],
      "correct_answer": [2, 1, 0, 3],
      "explanation": "Renaissance, then the Industrial Revolution, then World War I, then World War II."
    }""",
}


def suggested_duration(question_count: int) -> int:
    return max(question_count * 2, 15)


def build_system_prompt(request: QuizGenerationRequest) -> str:
    """Build the system prompt describing the quiz author role."""
    types = ", ".join(request.question_types)
    return f"""You are a helpful educational content creator. Create a quiz about "{request.topic}" for students learning {request.subject}.

Your task is to generate educational quiz questions that help students learn and practice their knowledge.

Instructions:
- Create {request.question_count} questions at {request.difficulty} level
- Make questions clear and educational
- Include helpful explanations for each answer
- Use only these question types: {types}
- Submit the quiz with the submit_quiz tool

Answer formats:
- Multiple choice: correct_answer as number index (0-3)
- True/False: correct_answer as 0 (True) or 1 (False)
- Fill in blank: correct_answer as 0, correct_answer_text as the answer
- Essay: correct_answer as 0, correct_answer_text as sample answer"""


def build_content_prompt(request: QuizGenerationRequest) -> str:
    """Build the user prompt. A non-blank custom prompt replaces the generated one."""
    if request.custom_prompt and request.custom_prompt.strip():
        logger.info("Using custom prompt override instead of generated prompt")
        return request.custom_prompt.strip()

    types = list(request.question_types)
    examples = ",\n    ".join(QUESTION_TYPE_EXAMPLES[t] for t in types if t in QUESTION_TYPE_EXAMPLES)

    explanation_note = ""
    if request.explanation_language.lower() != request.language.lower():
        explanation_note = (
            f"\n- Questions are in {request.language} but explanations must be translated into "
            f"{request.explanation_language}"
        )
    if request.explanation_language.lower() == "khmer":
        explanation_note += "\n- Write explanations in Khmer script with proper Khmer grammar"

    return f"""Create a {request.difficulty} level quiz about "{request.topic}" in the subject of {request.subject}.

Generate exactly {request.question_count} questions using ONLY these question types: {", ".join(types)}.
Every question must be one of: {" OR ".join(types)}.

LANGUAGE REQUIREMENTS:
- Generate questions in {request.language}
- Generate ALL explanations in {request.explanation_language}{explanation_note}

QUESTION TYPE FORMATS (ONLY USE THESE):
    {examples}

Return this JSON structure:
{{
  "title": "Quiz: {request.topic}",
  "description": "Test your knowledge of {request.topic}",
  "category": "{request.subject}",
  "difficulty": "{request.difficulty}",
  "duration_minutes": {suggested_duration(request.question_count)},
  "questions": [ ... ]
}}

CRITICAL REQUIREMENTS:
- Exactly {request.question_count} questions
- For multiple_choice: correct_answer is index (0-3), 4 options
- For true_false: correct_answer is 0 or 1, options ["True", "False"]
- For fill_blank and essay: correct_answer is 0, correct_answer_text has the answer
- For matching: correct_answer is array of pair indices, options are [{{"left": "...", "right": "..."}}]
- For ordering: correct_answer is array of correct order indices
- ALL questions must have detailed explanations
- Content should be educational and accurate"""
