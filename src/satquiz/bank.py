import json
import logging
from typing import Any, List, Optional

import pandas as pd
import requests
from pydantic import ValidationError

from .config import settings
from .models import QuestionRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("question", "options", "answer")
NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store", "Pragma": "no-cache"}


class LoadError(Exception):
    """The question bank could not be read or held no usable questions."""


# --- Service Layer: Question Bank ---
class QuestionBankLoader:
    """Reads the question bank from a local JSON file or an http(s) URL.

    The bank is re-read on every call so edits to the source are picked up
    by the next session without a restart.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source or settings.QUESTIONS_SOURCE

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    def load(self) -> List[QuestionRecord]:
        payload = self._fetch_remote() if self.is_remote else self._read_local()
        records = self._parse(payload)
        logger.info(f"Loaded {len(records)} questions from {self.source}")
        return records

    def _fetch_remote(self) -> Any:
        try:
            # No timeout: a session start waits for the bank or a failure.
            response = requests.get(self.source, headers=NO_CACHE_HEADERS)
        except requests.RequestException as e:
            raise LoadError(f"Could not reach {self.source}: {e}") from e

        if not response.ok:
            raise LoadError(
                f"Failed to load {self.source} ({response.status_code})"
            )
        try:
            return response.json()
        except ValueError as e:
            raise LoadError(f"{self.source} is not valid JSON: {e}") from e

    def _read_local(self) -> Any:
        try:
            with open(self.source, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise LoadError(f"Question bank {self.source} not found") from e
        except (OSError, ValueError) as e:
            raise LoadError(f"Could not read {self.source}: {e}") from e

    def _parse(self, payload: Any) -> List[QuestionRecord]:
        if not isinstance(payload, list) or not all(
            isinstance(item, dict) for item in payload
        ):
            raise LoadError(f"{self.source} must hold an array of question objects")
        if not payload:
            raise LoadError(f"{self.source} holds no questions")

        df = pd.DataFrame(payload)
        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise LoadError(f"{self.source} is missing fields: {', '.join(missing)}")

        records = []
        for position, row in enumerate(df[list(REQUIRED_COLUMNS)].to_dict("records")):
            try:
                records.append(QuestionRecord.model_validate(row))
            except ValidationError as e:
                logger.error(f"Skipping question #{position} in {self.source}: {e}")

        if not records:
            raise LoadError(f"{self.source} holds no usable questions")
        return records
