import random
from typing import Optional, Sequence

from .models import FeedbackMessage, Tone

CORRECT_MESSAGES = (
    "Affirmative!",
    "Perfect resolution!",
    "Well done!",
    "You've got the satellite view.",
    "Mission success!",
)

INCORRECT_MESSAGES = (
    "Missed the mark.",
    "Negative. Recalibrate your coordinates.",
    "That's not the right spectral band.",
    "Try again, surveyor.",
    "Nah, that ain't it...",
)

_rng = random.Random()


def pick_message(pool: Sequence[str], index: int) -> str:
    if not pool:
        raise ValueError("message pool is empty")
    return pool[index % len(pool)]


def select_message(
    correct: bool,
    correct_answer_text: str,
    rng: Optional[random.Random] = None,
) -> FeedbackMessage:
    """Draws a feedback line for an evaluated answer.

    Every call is an independent draw, so consecutive messages may repeat.
    Incorrect answers always end by naming the right option.
    """
    rng = rng or _rng
    if correct:
        text = pick_message(CORRECT_MESSAGES, rng.randrange(len(CORRECT_MESSAGES)))
        return FeedbackMessage(text=text, tone=Tone.CORRECT)

    prefix = pick_message(INCORRECT_MESSAGES, rng.randrange(len(INCORRECT_MESSAGES)))
    return FeedbackMessage(
        text=f"{prefix} The correct answer was: {correct_answer_text}.",
        tone=Tone.INCORRECT,
    )
