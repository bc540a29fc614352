"""
Unit tests for studio settings loading.
"""
import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import (
    get_batch_window,
    get_default_studio_settings,
    get_model_config,
    get_poll_policy,
    load_studio_settings,
    merge_studio_settings,
)


class TestStudioSettings:

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_studio_settings(str(tmp_path / "missing.yaml"))
        assert settings == get_default_studio_settings()
        assert get_batch_window(settings) == 4
        assert settings["storyboard"]["max_scenes"] == 5

    def test_yaml_overrides_merge_over_defaults(self, tmp_path):
        path = tmp_path / "studio.yaml"
        path.write_text(
            "studio:\n"
            "  batch:\n"
            "    window: 2\n"
            "  models:\n"
            "    video: veo-3.1-generate-preview\n"
            "  polling:\n"
            "    max_attempts: 60\n",
            encoding="utf-8",
        )

        settings = load_studio_settings(str(path))

        assert get_batch_window(settings) == 2
        assert get_model_config(settings)["video"] == "veo-3.1-generate-preview"
        assert get_model_config(settings)["text"] == "gemini-3-flash-preview"
        policy = get_poll_policy(settings)
        assert policy.max_attempts == 60
        assert policy.interval_sec == 5.0
        assert policy.timeout_sec is None

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("studio:\n  storyboard:\n    max_scenes: 3\n", encoding="utf-8")
        monkeypatch.setenv("ADSTUDIO_CONFIG", str(path))

        assert load_studio_settings()["storyboard"]["max_scenes"] == 3

    def test_bundled_file_matches_defaults(self, monkeypatch):
        monkeypatch.delenv("ADSTUDIO_CONFIG", raising=False)
        assert load_studio_settings() == get_default_studio_settings()

    def test_window_must_be_positive(self):
        settings = get_default_studio_settings()
        settings["batch"]["window"] = 0
        with pytest.raises(ValueError):
            get_batch_window(settings)

    def test_partial_dict_merges_over_defaults(self):
        settings = merge_studio_settings({"video": {"resolution": "1080p"}})
        assert settings["video"]["resolution"] == "1080p"
        assert get_batch_window(settings) == 4
        assert merge_studio_settings(None) == get_default_studio_settings()
