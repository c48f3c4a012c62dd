from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.core.config import settings
from app.core.logging import get_logger
from app.apis.quiz.schemas import (
    AnalyzeContentRequest,
    GenerateQuizRequest,
    GradeSubmissionRequest,
    StructuredGenerationRequest,
    StructuredGenerationResponse,
)
from app.modules.quiz import generator
from app.modules.quiz.models import ContentAnalysis, GeneratedQuiz, GradedSubmission
from app.modules.schema_bridge import (
    ObjectNode,
    SchemaBridgeError,
    UnsupportedSchemaError,
    from_wire,
    to_generation_schema,
    to_validation_schema,
    to_wire,
)


logger = get_logger(__name__)
router = APIRouter()


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _bad_schema(e: SchemaBridgeError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error": type(e).__name__, "message": str(e), "path": e.path},
    )


def _upstream_failure(e: generator.GenerationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post(
    f"/{settings.app.version}/quiz/generate",
    response_model=GeneratedQuiz,
    tags=["quiz"],
)
async def generate_quiz(req: GenerateQuizRequest) -> GeneratedQuiz:
    try:
        return await generator.generate_quiz(
            req.sources,
            num_questions=req.num_questions,
            include_multiple_choice=req.include_multiple_choice,
            include_written=req.include_written,
        )
    except ValueError as e:
        raise _bad_request(e)
    except generator.GenerationError as e:
        raise _upstream_failure(e)


@router.post(
    f"/{settings.app.version}/quiz/grade",
    response_model=GradedSubmission,
    tags=["quiz"],
)
async def grade_submission(req: GradeSubmissionRequest) -> GradedSubmission:
    try:
        return await generator.grade_submission(req.items)
    except ValueError as e:
        raise _bad_request(e)
    except generator.GenerationError as e:
        raise _upstream_failure(e)


@router.post(
    f"/{settings.app.version}/content/analyze",
    response_model=ContentAnalysis,
    tags=["content"],
)
async def analyze_content(req: AnalyzeContentRequest) -> ContentAnalysis:
    try:
        return await generator.analyze_content(req.texts)
    except ValueError as e:
        raise _bad_request(e)
    except generator.GenerationError as e:
        raise _upstream_failure(e)


@router.post(
    f"/{settings.app.version}/generate/structured",
    response_model=StructuredGenerationResponse,
    response_model_by_alias=True,
    tags=["generation"],
)
async def generate_structured(
    req: StructuredGenerationRequest,
) -> StructuredGenerationResponse:
    """Generate data for a caller-supplied generation schema.

    The schema is decoded and turned into a validation schema first, so a
    malformed schema is rejected before any model call.
    """
    try:
        shape = to_validation_schema(from_wire(req.schema_))
        if not isinstance(shape, ObjectNode):
            raise UnsupportedSchemaError("structured output root must be an object")
        canonical = to_wire(to_generation_schema(shape))
    except SchemaBridgeError as e:
        logger.info("Rejected structured schema: %s", e, extra={"schema": req.name})
        raise _bad_schema(e)

    try:
        data = await generator.generate_structured(req.prompt, shape, name=req.name)
    except generator.GenerationError as e:
        raise _upstream_failure(e)
    return StructuredGenerationResponse(data=data, schema=canonical)
