from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.modules.quiz.models import SubmissionItem


class GenerateQuizRequest(BaseModel):
    sources: list[str] = Field(..., description="Source texts to build the quiz from")
    num_questions: int = Field(default=10, ge=1, le=50)
    include_multiple_choice: bool = True
    include_written: bool = True


class GradeSubmissionRequest(BaseModel):
    items: list[SubmissionItem] = Field(..., description="Answered questions to grade")


class AnalyzeContentRequest(BaseModel):
    texts: list[str] = Field(..., description="Raw text extracted from uploaded files")


class StructuredGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    schema_: dict[str, Any] = Field(
        ..., alias="schema", description="Generation schema the output must follow"
    )
    name: str = Field(default="structured_output", description="Output tool name")


class StructuredGenerationResponse(BaseModel):
    data: dict[str, Any]
    schema_: dict[str, Any] = Field(..., alias="schema")
