"""
ADSTUDIO Configuration Loader
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from schemas import RetryPolicy
from utils import constants

# 기본 설정 디렉토리
CONFIG_DIR = Path(__file__).parent


def load_studio_settings(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Studio 설정 로드

    Args:
        config_path: 설정 파일 경로 (기본: ADSTUDIO_CONFIG env, 없으면 config/studio.yaml)

    Returns:
        설정 딕셔너리 (파일이 없으면 기본값)
    """
    if config_path is None:
        config_path = os.getenv("ADSTUDIO_CONFIG") or CONFIG_DIR / "studio.yaml"

    if not os.path.exists(config_path):
        return get_default_studio_settings()

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return merge_studio_settings(config.get("studio", {}))


def merge_studio_settings(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """부분 설정(dict)을 기본값 위에 병합"""
    return _merge(get_default_studio_settings(), overrides or {})


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_default_studio_settings() -> Dict[str, Any]:
    """기본 studio 설정 반환"""
    return {
        "models": {
            "text": constants.MODEL_GEMINI_TEXT,
            "image": constants.MODEL_GEMINI_IMAGE,
            "video": constants.MODEL_VEO_VIDEO,
        },
        "video": {
            "resolution": constants.VIDEO_RESOLUTION,
        },
        "batch": {
            "window": constants.BATCH_WINDOW,
        },
        "polling": {
            "interval_sec": constants.POLL_INTERVAL_SEC,
            "max_attempts": None,
            "timeout_sec": None,
        },
        "storyboard": {
            "max_scenes": constants.MAX_STORYBOARD_SCENES,
        },
        "credentials": {
            "env_var": constants.API_KEY_ENV,
        },
    }


def get_model_config(settings: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """text / image / video 모델명"""
    settings = settings or load_studio_settings()
    return settings["models"]


def get_batch_window(settings: Optional[Dict[str, Any]] = None) -> int:
    settings = settings or load_studio_settings()
    window = int(settings["batch"]["window"])
    if window < 1:
        raise ValueError(f"batch.window must be >= 1, got {window}")
    return window


def get_poll_policy(settings: Optional[Dict[str, Any]] = None) -> RetryPolicy:
    """Veo 폴링 정책. max_attempts / timeout_sec 가 비어 있으면 무제한."""
    settings = settings or load_studio_settings()
    return RetryPolicy(**settings["polling"])
