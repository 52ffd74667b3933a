import random
from typing import List, Optional

from .models import QuestionRecord

_rng = random.Random()


def present(question: QuestionRecord, rng: Optional[random.Random] = None) -> List[str]:
    """Returns the question's options in a fresh random order."""
    rng = rng or _rng
    options = list(question.options)
    rng.shuffle(options)
    return options
