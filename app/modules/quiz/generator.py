"""Structured generation for quizzes, grading and content analysis.

Provides:
- async generate_structured(prompt, shape, name) -> dict
- async generate_quiz(...) -> GeneratedQuiz
- async grade_submission(items) -> GradedSubmission
- async analyze_content(texts) -> ContentAnalysis

Each call converts its validation schema into a generation schema, hands the
wire form to a pydantic-ai agent as the output contract, and validates the
model's JSON against the same validation schema.
"""

from __future__ import annotations

import json
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_ai import Agent, ModelRetry, StructuredDict

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.quiz.models import (
    ContentAnalysis,
    GeneratedQuiz,
    GradedSubmission,
    SubmissionItem,
)
from app.modules.schema_bridge import (
    ObjectNode,
    UnsupportedSchemaError,
    from_model,
    parse,
    to_generation_schema,
    to_wire,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class GenerationError(Exception):
    """Model call failed or returned data that does not fit the schema."""

    pass


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    if not settings.gemini_api_key:
        raise GenerationError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(settings.gemini_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    if not settings.openrouter_api_key:
        raise GenerationError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


SYSTEM_PROMPT = (
    "You are an expert educator who writes and grades study quizzes. "
    "Return a single JSON object that matches the provided output schema exactly. "
    "Rules: "
    "- Plain text only: no markdown, no code fences. "
    "- Fill every required field; use null only where a field is nullable. "
    "- No extra keys or commentary."
)


def _build_agent(name: str, json_schema: dict[str, Any], shape: ObjectNode) -> Agent:
    model = _build_model_by_settings()
    agent = Agent(
        model=model,
        output_type=StructuredDict(json_schema, name=name),
        system_prompt=SYSTEM_PROMPT,
        retries=settings.generation_retries,
    )

    @agent.output_validator
    def _matches_shape(output: dict[str, Any]) -> dict[str, Any]:
        try:
            return parse(shape, output)
        except ValidationError as e:
            logger.info("Asking model to fix its output", extra={"schema": name})
            raise ModelRetry(f"Output does not match the {name} schema: {e}") from e

    return agent


async def generate_structured(
    prompt: str, shape: ObjectNode, *, name: str = "structured_output"
) -> dict[str, Any]:
    """Run the model against ``shape`` and return validated plain data."""
    if not isinstance(shape, ObjectNode):
        raise UnsupportedSchemaError("structured output root must be an object")
    wire_schema = to_wire(to_generation_schema(shape))
    agent = _build_agent(name, wire_schema, shape)

    logger.info("Requesting structured output", extra={"schema": name})
    try:
        res = await agent.run(prompt)
    except Exception as e:
        logger.exception("Model call failed", extra={"schema": name})
        raise GenerationError(f"Model call failed: {e}") from e

    try:
        return parse(shape, res.output)
    except ValidationError as e:
        logger.warning(
            "Model output rejected (%d errors)", e.error_count(), extra={"schema": name}
        )
        raise GenerationError(f"Model output does not match the {name} schema") from e


async def _generate_as(model_cls: type[M], prompt: str, name: str) -> M:
    data = await generate_structured(prompt, from_model(model_cls), name=name)
    return model_cls.model_validate(data)


def _sources_block(texts: Sequence[str]) -> str:
    return "---\n" + "\n\n---\n".join(t.strip() for t in texts) + "\n---"


def split_question_counts(
    num_questions: int, include_multiple_choice: bool, include_written: bool
) -> tuple[int, int]:
    """Share ``num_questions`` between multiple-choice and written questions."""
    if not include_multiple_choice and not include_written:
        raise ValueError("At least one question type must be enabled")
    n = max(1, int(num_questions))
    if not include_written:
        return n, 0
    if not include_multiple_choice:
        return 0, n
    num_mc = (n + 1) // 2
    return num_mc, n - num_mc


def _quiz_instruction(sources: Sequence[str], num_mc: int, num_written: int) -> str:
    return (
        "Generate a quiz titled appropriately based on the source material(s). "
        f"The quiz should have exactly {num_mc + num_written} questions total: "
        f"{num_mc} multiple-choice questions and {num_written} written questions. "
        "Cover the key concepts presented. For multiple-choice, provide 4 distinct "
        "choices with exactly one marked correct.\n"
        f"Source Material:\n{_sources_block(sources)}"
    )


async def generate_quiz(
    sources: Sequence[str],
    num_questions: int = 10,
    include_multiple_choice: bool = True,
    include_written: bool = True,
) -> GeneratedQuiz:
    """Generate a quiz from source texts."""
    if not [s for s in sources if s and s.strip()]:
        raise ValueError("At least one non-empty source is required")
    num_mc, num_written = split_question_counts(
        num_questions, include_multiple_choice, include_written
    )
    quiz = await _generate_as(
        GeneratedQuiz, _quiz_instruction(sources, num_mc, num_written), "generated_quiz"
    )
    got_mc = len(quiz.multiple_choice_questions)
    got_written = len(quiz.written_questions)
    if got_mc != num_mc or got_written != num_written:
        logger.warning(
            "Model returned %d MC and %d written questions, expected %d and %d",
            got_mc,
            got_written,
            num_mc,
            num_written,
        )
    return quiz


def _grading_context(items: Sequence[SubmissionItem]) -> str:
    blocks: list[str] = []
    for item in items:
        details = f"Question {item.question_id} (Type: {item.question_type}):\n{item.question}"
        if item.question_type == "multiple_choice" and item.choices:
            details += f"\nOptions: {json.dumps(item.choices)}"
            details += f"\nCorrect Answer Text: {item.correct_answer}"
        elif item.question_type == "written":
            details += f"\nIdeal Correct Answer: {item.correct_answer or '[Not Provided]'}"
        details += f"\nStudent Answer: {item.student_answer or '[No Answer]'}"
        blocks.append(details)
    return "\n\n".join(blocks)


async def grade_submission(items: Sequence[SubmissionItem]) -> GradedSubmission:
    """Grade answered questions; one response per item, in order."""
    if not items:
        raise ValueError("Nothing to grade")
    prompt = (
        "Grade the following student submission based on the provided questions, "
        "correct answers, and student answers. For each question, give specific "
        "feedback and a verdict of 'pass' or 'fail'.\n"
        f"Context:\n---\n{_grading_context(items)}\n---"
    )
    graded = await _generate_as(GradedSubmission, prompt, "graded_submission")
    if len(graded.responses) != len(items):
        logger.warning(
            "Model graded %d responses for %d questions",
            len(graded.responses),
            len(items),
        )
    return graded


async def analyze_content(texts: Sequence[str]) -> ContentAnalysis:
    """Produce a title, short overview and slug for uploaded content."""
    if not [t for t in texts if t and t.strip()]:
        raise ValueError("No content to analyze")
    prompt = (
        "Analyze the following content extracted from one or more files and provide "
        "a concise title, a brief overview (2-3 sentences), and a URL-friendly slug. "
        f"Content:\n\n{_sources_block(texts)}"
    )
    return await _generate_as(ContentAnalysis, prompt, "content_analysis")
