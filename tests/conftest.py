"""
Shared pytest fixtures for satquiz tests.
"""

import json
import os
import random

import pytest

# Keep test runs from writing log files or reaching for a redis server.
os.environ["SATQUIZ_LOG_TO_FILE"] = "0"
os.environ["SATQUIZ_SESSION_BACKEND"] = "memory"
os.environ.pop("SATQUIZ_QUESTIONS_SOURCE", None)

from satquiz.models import QuestionRecord, SessionState  # noqa: E402

RAW_BANK = [
    {
        "question": "Which fish is the largest in the Caspian Sea?",
        "options": ["catfish", "sturgeon", "pike", "carp"],
        "answer": "sturgeon",
    },
    {
        "question": "Which band penetrates cloud cover?",
        "options": ["C-band radar", "Blue", "Near-infrared"],
        "answer": "C-band radar",
    },
    {
        "question": "What does NDVI measure?",
        "options": ["Vegetation health", "Sea level", "Cloud height"],
        "answer": "Vegetation health",
    },
]


@pytest.fixture
def raw_bank():
    return [dict(item) for item in RAW_BANK]


@pytest.fixture
def small_bank():
    """Three valid questions; fewer than a full session."""
    return [QuestionRecord(**item) for item in RAW_BANK]


@pytest.fixture
def large_bank():
    """Twenty-five distinct questions; more than a full session."""
    return [
        QuestionRecord(
            question=f"Question {i}?",
            options=[f"right {i}", f"wrong {i}a", f"wrong {i}b"],
            answer=f"right {i}",
        )
        for i in range(25)
    ]


@pytest.fixture
def answers(small_bank):
    return {q.question: q.answer for q in small_bank}


@pytest.fixture
def bank_file(tmp_path, raw_bank):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(raw_bank), encoding="utf-8")
    return path


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def state():
    return SessionState()
