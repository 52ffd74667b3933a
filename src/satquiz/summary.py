from .models import FeedbackMessage, SessionState, Tone

PERFECT_MESSAGE = "You've achieved perfect resolution! All correct!"
COMPLETE_HEADING = "Quiz Complete!"


def summarize(state: SessionState, total: int) -> FeedbackMessage:
    if state.score == total:
        text = PERFECT_MESSAGE
    else:
        text = f"You scored {state.score} out of {total}. Keep learning about our world!"
    return FeedbackMessage(text=text, tone=Tone.SUMMARY)
