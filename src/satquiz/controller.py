import logging
import random
from typing import Optional, Sequence, Tuple

from .bank import LoadError, QuestionBankLoader
from .config import settings
from .evaluator import AlreadyAnsweredError, evaluate
from .feedback import select_message
from .models import (
    EvaluationResult,
    FeedbackMessage,
    QuestionRecord,
    QuestionView,
    SessionData,
    SessionStatus,
)
from .presenter import present
from .sampler import sample
from .summary import COMPLETE_HEADING, summarize

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = (
    "Failed to load questions. Please make sure questions.json is available."
)


class QuizController:
    """Drives one quiz session from loading through the final summary.

    States run LOADING -> IN_PROGRESS -> COMPLETE, with ERROR when the bank
    cannot be loaded. ``restart`` throws the session away and draws a new one.
    The controller does not check that the current question was answered
    before ``advance``; callers gate that.
    """

    def __init__(
        self,
        session: Optional[SessionData] = None,
        rng: Optional[random.Random] = None,
        quiz_length: int = settings.QUIZ_LENGTH,
    ):
        self.session = session or SessionData()
        self.rng = rng or random.Random()
        self.quiz_length = quiz_length

    @property
    def status(self) -> SessionStatus:
        return self.session.status

    def start(self, loader: QuestionBankLoader) -> SessionData:
        self.session = SessionData(status=SessionStatus.LOADING)
        try:
            bank = loader.load()
        except LoadError as e:
            logger.error(f"Error loading question bank: {e}")
            self.session = SessionData(status=SessionStatus.ERROR, error=str(e))
            return self.session
        return self.begin(bank)

    def begin(self, bank: Sequence[QuestionRecord]) -> SessionData:
        questions = sample(bank, self.quiz_length, self.rng)
        self.session = SessionData(status=SessionStatus.IN_PROGRESS, questions=questions)
        self._enter_question()
        return self.session

    def restart(self, loader: QuestionBankLoader) -> SessionData:
        """Replaces the session with a freshly loaded and re-sampled one."""
        return self.start(loader)

    def current_question(self) -> QuestionRecord:
        self._require(SessionStatus.IN_PROGRESS)
        return self.session.questions[self.session.state.current_index]

    def submit(self, answer: str) -> Tuple[EvaluationResult, FeedbackMessage]:
        question = self.current_question()
        try:
            result = evaluate(self.session.state, answer, question.answer)
        except AlreadyAnsweredError:
            logger.info(
                f"Ignoring repeated answer for Q{self.session.state.current_index}"
            )
            previous = self.session.last_result.model_copy(
                update={"already_answered": True}
            )
            return previous, self.session.last_feedback

        feedback = select_message(result.correct, result.correct_answer_text, self.rng)
        self.session.last_result = result
        self.session.last_feedback = feedback
        return result, feedback

    def advance(self) -> SessionData:
        self._require(SessionStatus.IN_PROGRESS)
        self.session.state.current_index += 1
        self._enter_question()
        return self.session

    def summary(self) -> FeedbackMessage:
        self._require(SessionStatus.COMPLETE)
        return self.session.summary

    def current_view(self) -> QuestionView:
        session = self.session
        state = session.state
        total = session.total

        if session.status == SessionStatus.IN_PROGRESS:
            label = f"Q{state.current_index + 1}: {self.current_question().question}"
        elif session.status == SessionStatus.COMPLETE:
            label = COMPLETE_HEADING
        elif session.status == SessionStatus.ERROR:
            label = LOAD_FAILED_MESSAGE
        else:
            label = "Loading..."

        return QuestionView(
            status=session.status,
            current_index=state.current_index,
            total=total,
            score=state.score,
            score_text=f"Score: {state.score} / {total or self.quiz_length}",
            label=label,
            options=session.presented_options,
            answered=state.answered,
            feedback=session.last_feedback,
            correct_answer=(
                session.last_result.correct_answer_text if session.last_result else None
            ),
            summary=session.summary,
        )

    def _enter_question(self):
        session = self.session
        session.state.answered = False
        session.last_result = None
        session.last_feedback = None

        if session.state.current_index >= session.total:
            session.status = SessionStatus.COMPLETE
            session.presented_options = []
            session.summary = summarize(session.state, session.total)
            logger.info(
                f"Session complete: {session.state.score} / {session.total}"
            )
        else:
            session.presented_options = present(self.current_question(), self.rng)

    def _require(self, status: SessionStatus):
        if self.session.status != status:
            raise ValueError(
                f"session is {self.session.status.value}, expected {status.value}"
            )
