import logging

from .models import EvaluationResult, SessionState

logger = logging.getLogger(__name__)


class AlreadyAnsweredError(Exception):
    """The current question already received an evaluated answer."""


def evaluate(state: SessionState, submitted: str, correct: str) -> EvaluationResult:
    """Scores one submission for the current question.

    Matching is exact string equality. The score moves by at most one per
    question: once ``state.answered`` is set, further calls raise
    ``AlreadyAnsweredError`` and leave the state untouched. Advancing to the
    next question is left to the caller.
    """
    if state.answered:
        raise AlreadyAnsweredError(
            f"question {state.current_index} has already been answered"
        )

    is_correct = submitted == correct
    if is_correct:
        state.score += 1
    state.answered = True

    logger.info(
        f"Q{state.current_index}: '{submitted}' -> "
        f"{'CORRECT' if is_correct else 'INCORRECT'}"
    )
    return EvaluationResult(
        submitted=submitted, correct=is_correct, correct_answer_text=correct
    )
