"""Pydantic models for AI-authored quizzes, grades and content analysis.

These double as the shapes handed to the model: ``from_model`` turns each
one into a validation schema, so fields stay within what the schema bridge
supports (strings, numbers, booleans, literals, lists, nested models).
Question kinds are kept in separate lists instead of a tagged union.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class GeneratedChoice(BaseModel):
    text: str
    is_correct: bool


class GeneratedMultipleChoiceQuestion(BaseModel):
    question_type: Literal["multiple_choice"]
    question: str
    choices: list[GeneratedChoice]


class GeneratedWrittenQuestion(BaseModel):
    question_type: Literal["written"]
    question: str


class GeneratedQuiz(BaseModel):
    """A titled quiz split by question kind."""

    title: str
    multiple_choice_questions: list[GeneratedMultipleChoiceQuestion] = Field(
        default_factory=list
    )
    written_questions: list[GeneratedWrittenQuestion] = Field(default_factory=list)


class GradedResponse(BaseModel):
    question: str
    student_answer: str
    correct_answer: str
    verdict: Literal["pass", "fail"]
    feedback: str


class GradedSubmission(BaseModel):
    responses: list[GradedResponse]


class ContentAnalysis(BaseModel):
    title: str = Field(description="A concise, descriptive title for the content.")
    overview: str = Field(
        description="A brief 2-3 sentence summary of the main topics."
    )
    slug: str = Field(
        description="A URL-friendly slug (lowercase, hyphens for spaces)."
    )


class SubmissionItem(BaseModel):
    """One answered question handed to the grader."""

    question_id: str
    question_type: Literal["multiple_choice", "written"]
    question: str
    choices: Optional[list[str]] = None
    correct_answer: Optional[str] = None
    student_answer: Optional[str] = None
