from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tone(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SUMMARY = "summary"


class SessionStatus(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    ERROR = "error"


# --- Models ---
class QuestionRecord(BaseModel):
    """One multiple-choice question as stored in the bank."""

    model_config = ConfigDict(frozen=True)

    question: str
    options: List[str]
    answer: str

    @model_validator(mode="after")
    def check_answer_in_options(self) -> "QuestionRecord":
        if len(self.options) < 2:
            raise ValueError("a question needs at least two options")
        matches = self.options.count(self.answer)
        if matches != 1:
            raise ValueError(
                f"answer {self.answer!r} must appear exactly once in options "
                f"(found {matches})"
            )
        return self


class SessionState(BaseModel):
    current_index: int = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0)
    answered: bool = False


class EvaluationResult(BaseModel):
    submitted: str
    correct: bool
    correct_answer_text: str
    already_answered: bool = False


class FeedbackMessage(BaseModel):
    text: str
    tone: Tone


class SessionData(BaseModel):
    status: SessionStatus = SessionStatus.LOADING
    questions: List[QuestionRecord] = []
    state: SessionState = Field(default_factory=SessionState)
    presented_options: List[str] = []
    last_result: Optional[EvaluationResult] = None
    last_feedback: Optional[FeedbackMessage] = None
    summary: Optional[FeedbackMessage] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return len(self.questions)


class QuestionView(BaseModel):
    """What the page needs to draw the current step of a session."""

    status: SessionStatus
    current_index: int
    total: int
    score: int
    score_text: str
    label: str
    options: List[str]
    answered: bool
    feedback: Optional[FeedbackMessage] = None
    correct_answer: Optional[str] = None
    summary: Optional[FeedbackMessage] = None
