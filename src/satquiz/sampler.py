import random
from typing import List, Optional, Sequence

from .models import QuestionRecord

_rng = random.Random()


def sample(
    bank: Sequence[QuestionRecord], k: int, rng: Optional[random.Random] = None
) -> List[QuestionRecord]:
    """Draws up to ``k`` questions from ``bank`` in random order, without replacement.

    A bank smaller than ``k`` yields a shorter session rather than an error.
    """
    if not bank:
        raise ValueError("cannot sample from an empty question bank")
    rng = rng or _rng
    shuffled = list(bank)
    rng.shuffle(shuffled)
    return shuffled[: min(k, len(shuffled))]
