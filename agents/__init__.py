"""
ADSTUDIO Agents Package

오케스트레이션 계층:
- GenerationClient: Gemini / Veo 호출 (분석, 텍스트 프롬프트, 이미지/비디오 합성)
- VideoJobPoller: Veo 작업 핸들 폴링
- BatchOrchestrator: window 단위 병렬 배치 + 부분 실패 집계
- StudioAgent: 스튜디오 / 합성 이미지 배치 흐름
- StoryboardOrchestrator: 씬별 비디오 생성 (씬 단위 상태 추적)
"""

from .errors import (
    GenerationError,
    NoArtifactError,
    PollTimeoutError,
    CredentialError,
    NoEligibleScenesError,
    TotalFailureError,
    is_credential_error,
)
from .credentials import (
    CredentialProvider,
    EnvCredentialProvider,
    StaticCredentialProvider,
    ensure_credential,
)
from .video_poller import VideoJobPoller
from .generation_client import GenerationClient, authorized_download_url
from .batch_orchestrator import BatchOrchestrator
from .studio_agent import StudioAgent
from .storyboard import StoryboardDraft, StoryboardOrchestrator

__all__ = [
    "GenerationError",
    "NoArtifactError",
    "PollTimeoutError",
    "CredentialError",
    "NoEligibleScenesError",
    "TotalFailureError",
    "is_credential_error",
    "CredentialProvider",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
    "ensure_credential",
    "VideoJobPoller",
    "GenerationClient",
    "authorized_download_url",
    "BatchOrchestrator",
    "StudioAgent",
    "StoryboardDraft",
    "StoryboardOrchestrator",
]
