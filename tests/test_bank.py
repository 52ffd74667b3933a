"""
Tests for loading the question bank from files and URLs.
"""

import json
import os
from unittest.mock import Mock, patch

import pytest
import requests

from satquiz.bank import NO_CACHE_HEADERS, LoadError, QuestionBankLoader
from satquiz.models import QuestionRecord

URL = "https://example.org/questions.json"


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload
    return response


class TestLocalBank:
    def test_loads_all_records(self, bank_file, raw_bank):
        records = QuestionBankLoader(str(bank_file)).load()
        assert len(records) == len(raw_bank)
        assert all(isinstance(r, QuestionRecord) for r in records)
        assert records[0].answer == "sturgeon"
        assert records[0].options == ["catfish", "sturgeon", "pike", "carp"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError, match="not found"):
            QuestionBankLoader(str(tmp_path / "nope.json")).load()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text("[{not json", encoding="utf-8")
        with pytest.raises(LoadError):
            QuestionBankLoader(str(path)).load()

    def test_payload_must_be_array_of_objects(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps({"question": "x"}), encoding="utf-8")
        with pytest.raises(LoadError, match="array"):
            QuestionBankLoader(str(path)).load()

    def test_empty_bank(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(LoadError, match="no questions"):
            QuestionBankLoader(str(path)).load()

    def test_missing_fields(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps([{"question": "q", "options": ["a", "b"]}]))
        with pytest.raises(LoadError, match="answer"):
            QuestionBankLoader(str(path)).load()

    def test_malformed_records_are_skipped(self, tmp_path, raw_bank):
        bad = [
            {"question": "No answer among options", "options": ["a", "b"], "answer": "c"},
            {"question": "Single option", "options": ["a"], "answer": "a"},
        ]
        path = tmp_path / "questions.json"
        path.write_text(json.dumps(raw_bank + bad), encoding="utf-8")

        records = QuestionBankLoader(str(path)).load()
        assert [r.question for r in records] == [item["question"] for item in raw_bank]

    def test_only_malformed_records(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(
            json.dumps([{"question": "q", "options": ["a", "b"], "answer": "z"}])
        )
        with pytest.raises(LoadError, match="no usable questions"):
            QuestionBankLoader(str(path)).load()


class TestRemoteBank:
    @patch("satquiz.bank.requests.get")
    def test_fetch_bypasses_caches(self, mock_get, raw_bank):
        mock_get.return_value = _response(payload=raw_bank)

        loader = QuestionBankLoader(URL)
        assert loader.is_remote
        records = loader.load()

        assert len(records) == 3
        mock_get.assert_called_once_with(URL, headers=NO_CACHE_HEADERS)
        assert "no-cache" in NO_CACHE_HEADERS["Cache-Control"]

    @patch("satquiz.bank.requests.get")
    def test_non_ok_status(self, mock_get):
        mock_get.return_value = _response(status_code=404)
        with pytest.raises(LoadError, match="404"):
            QuestionBankLoader(URL).load()

    @patch("satquiz.bank.requests.get")
    def test_unreachable(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(LoadError, match="Could not reach"):
            QuestionBankLoader(URL).load()

    @patch("satquiz.bank.requests.get")
    def test_invalid_json_body(self, mock_get):
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = response
        with pytest.raises(LoadError, match="not valid JSON"):
            QuestionBankLoader(URL).load()

    def test_default_source_comes_from_settings(self):
        from satquiz.config import settings

        assert QuestionBankLoader().source == settings.QUESTIONS_SOURCE


class TestPackagedBank:
    def test_default_source_ships_with_package(self):
        import satquiz
        from satquiz.config import settings

        package_dir = os.path.dirname(os.path.abspath(satquiz.__file__))
        assert settings.QUESTIONS_SOURCE == os.path.join(package_dir, "questions.json")
        assert os.path.isfile(settings.QUESTIONS_SOURCE)

    def test_packaged_bank_fills_a_session(self):
        records = QuestionBankLoader().load()
        assert len(records) >= 10
