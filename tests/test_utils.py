"""
Unit tests for helper utilities: JSON unwrapping, image payloads,
the error ledger and credential providers.
"""
import asyncio
import json
import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from agents import EnvCredentialProvider, StaticCredentialProvider, ensure_credential, is_credential_error
from utils.error_manager import ErrorManager
from utils.images import clean_base64, data_uri_to_bytes, guess_mime_type, to_data_uri
from utils.llm_utils import parse_llm_json, strip_code_fence


class TestLLMJson:

    def test_plain_json(self):
        assert parse_llm_json('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert strip_code_fence('```json\n[1, 2]\n```') == "[1, 2]"
        assert parse_llm_json('```\n{"a": 1}\n```') == {"a": 1}

    def test_unclosed_fence(self):
        assert parse_llm_json('```json\n{"a": 1}') == {"a": 1}

    def test_empty_is_error(self):
        with pytest.raises(json.JSONDecodeError):
            parse_llm_json("")


class TestImages:

    def test_data_uri_round_trip(self):
        uri = to_data_uri(b"\x00\x01pixels")
        assert uri.startswith("data:image/png;base64,")
        assert data_uri_to_bytes(uri) == b"\x00\x01pixels"

    def test_clean_base64(self):
        assert clean_base64("data:image/jpeg;base64,QUJD") == "QUJD"
        assert clean_base64("QUJD") == "QUJD"

    def test_guess_mime_type(self):
        assert guess_mime_type("shot.PNG") == "image/png"
        assert guess_mime_type("shot.bin") == "image/jpeg"


class TestErrorManager:

    def test_ledger_keeps_recent_entries(self, monkeypatch):
        monkeypatch.setattr(ErrorManager, "MAX_ENTRIES", 3)
        for i in range(5):
            ErrorManager.log_error("Test", f"failure {i}", details=f"job-{i}")

        recent = ErrorManager.get_recent_errors()
        assert len(recent) == 3
        assert {e["message"] for e in recent} == {"failure 2", "failure 3", "failure 4"}

    @pytest.mark.parametrize("payload", [b"{}", b'"text"', b"\xff\xfe\x00bad"])
    def test_unusable_ledger_is_replaced(self, payload):
        with open(ErrorManager.LOG_FILE, "wb") as f:
            f.write(payload)

        ErrorManager.log_error("Test", "after corruption")

        recent = ErrorManager.get_recent_errors()
        assert [e["message"] for e in recent] == ["after corruption"]

    def test_write_failure_is_not_raised(self, tmp_path, monkeypatch):
        # a directory where the ledger file should be
        blocked = tmp_path / "ledger_dir"
        blocked.mkdir()
        monkeypatch.setattr(ErrorManager, "LOG_FILE", str(blocked))

        ErrorManager.log_error("Test", "cannot persist")

    def test_clear(self):
        ErrorManager.log_error("Test", "boom")
        ErrorManager.clear_logs()
        assert ErrorManager.get_recent_errors() == []


class TestCredentials:

    def test_env_provider_reads_at_call_time(self, monkeypatch):
        provider = EnvCredentialProvider("ADSTUDIO_TEST_KEY")
        monkeypatch.delenv("ADSTUDIO_TEST_KEY", raising=False)
        assert not provider.is_ready()
        monkeypatch.setenv("ADSTUDIO_TEST_KEY", "abc")
        assert provider.get_api_key() == "abc"

    def test_gate_without_provider(self):
        assert asyncio.run(ensure_credential(None)) is True

    def test_gate_prompts_when_not_ready(self):
        provider = StaticCredentialProvider(None)
        assert asyncio.run(ensure_credential(provider)) is True
        assert provider.selection_requests == 1

    def test_gate_skips_prompt_when_ready(self):
        provider = StaticCredentialProvider("k")
        asyncio.run(ensure_credential(provider))
        assert provider.selection_requests == 0

    def test_credential_error_detection(self):
        assert is_credential_error(RuntimeError("404 NOT_FOUND. Requested entity was not found."))
        assert not is_credential_error(RuntimeError("429 quota exceeded"))
