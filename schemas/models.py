"""
ADSTUDIO Data Models

공통 데이터 모델 정의 (Pydantic 기반)
- GenerationRequest: 한 번의 생성 호출을 기술하는 불변 값
- GenerationJob: 진행 중/완료된 단위 작업 (pending → in_progress → completed|failed)
- BatchRun: 함께 실행된 작업 묶음과 부분 실패 집계
- StoryboardScene / StoryboardRun: 스토리보드 씬 입력과 씬별 결과 슬롯
"""

import math
from enum import Enum
from typing import Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from utils.images import decode_image_payload, guess_mime_type


class JobKind(str, Enum):
    """생성 작업 종류"""
    ANALYSIS = "analysis"
    TEXT_PROMPT = "text_prompt"
    IMAGE_SYNTHESIS = "image_synthesis"
    VIDEO_SYNTHESIS = "video_synthesis"
    BULK_VARIATION = "bulk_variation"


class JobStatus(str, Enum):
    """작업 상태"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class SceneStatus(str, Enum):
    """스토리보드 씬 상태"""
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class BatchOutcome(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


class AspectRatio(str, Enum):
    """화면 비율"""
    SQUARE = "1:1"
    PORTRAIT_3_4 = "3:4"
    LANDSCAPE_4_3 = "4:3"
    LANDSCAPE_16_9 = "16:9"
    PORTRAIT_9_16 = "9:16"


VIDEO_ASPECT_RATIOS = frozenset({
    AspectRatio.SQUARE, AspectRatio.PORTRAIT_9_16, AspectRatio.LANDSCAPE_16_9,
})
COMPOSITE_ASPECT_RATIOS = frozenset(AspectRatio)


def validate_aspect_ratio(ratio, allowed=VIDEO_ASPECT_RATIOS) -> AspectRatio:
    """Coerce `ratio` to AspectRatio and check it is in `allowed`.

    Raises:
        ValueError: unknown ratio or not allowed for this flow
    """
    value = AspectRatio(ratio)
    if value not in allowed:
        options = ", ".join(sorted(r.value for r in allowed))
        raise ValueError(f"Aspect ratio {value.value} not supported here (allowed: {options})")
    return value


class InvalidTransitionError(RuntimeError):
    """GenerationJob 상태 전이 위반"""


class DraftLockedError(RuntimeError):
    """생성 실행 중 스토리보드 편집 시도"""


class _CamelModel(BaseModel):
    """Backend JSON uses camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =========================================================================
# Inputs
# =========================================================================

class TaggedImage(BaseModel):
    """업로드 이미지 + 역할 태그 (@img1 = 제품, @img2 = 모델)"""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="raw image bytes")
    mime_type: str = Field(default="image/jpeg")
    tag: str = Field(default="", description="positional role tag")

    @classmethod
    def from_path(cls, path: str, tag: str = "") -> "TaggedImage":
        with open(path, "rb") as f:
            data = f.read()
        return cls(data=data, mime_type=guess_mime_type(path), tag=tag)

    @classmethod
    def from_base64(cls, payload: str, tag: str = "", mime_type: str = "image/jpeg") -> "TaggedImage":
        return cls(data=decode_image_payload(payload), mime_type=mime_type, tag=tag)


class BrandProfile(BaseModel):
    """브랜드 스타일/톤/대비 설명 (읽기 전용)"""
    model_config = ConfigDict(frozen=True)

    style: str = ""
    tone: str = ""
    contrast: str = ""


class GenerationRequest(BaseModel):
    """
    한 번의 생성 호출을 기술하는 불변 값.

    Prompt Builder가 만들고 GenerationClient가 한 번 소비합니다.
    변형(variation)은 model_copy로 파생된 새 값입니다.
    """
    model_config = ConfigDict(frozen=True)

    kind: JobKind
    instruction: str = Field(..., description="rendered user-turn text")
    system_instruction: Optional[str] = None
    images: Tuple[TaggedImage, ...] = ()
    aspect_ratio: Optional[AspectRatio] = None
    quantity: int = Field(default=1, ge=1)

    def with_instruction(self, instruction: str) -> "GenerationRequest":
        return self.model_copy(update={"instruction": instruction})


class RetryPolicy(BaseModel):
    """Polling bound for long-running jobs. None means unbounded."""
    interval_sec: float = Field(default=5.0, gt=0)
    max_attempts: Optional[int] = Field(default=None, ge=0)
    timeout_sec: Optional[float] = Field(default=None, gt=0)


# =========================================================================
# Backend payloads
# =========================================================================

class AnalysisResult(_CamelModel):
    """제품 분석 결과. description만 필수, 나머지는 누락 시 중립 기본값."""
    description: str
    usp: str = "High Quality"
    product_category: str = "General"
    target_gender: str = "Unisex"

    @classmethod
    def fallback(cls) -> "AnalysisResult":
        return cls(
            description="Analysis failed",
            usp="High Quality",
            product_category="General",
            target_gender="Unisex",
        )


class VideoScene(_CamelModel):
    """스토리보드 스크립트의 한 씬"""
    scene_number: int
    shot_type: str = ""
    camera_angle: str = ""
    action_description: str = ""
    visual_prompt: str = ""
    voice_over: str = ""
    duration: float = 0


class PhotoVariation(_CamelModel):
    variation_id: int
    prompt: str


class ScriptScene(_CamelModel):
    scene_number: int
    visual_prompt: str = ""
    voice_over: str = ""


class VideoScript(_CamelModel):
    script_id: int
    concept_name: str = ""
    scenes: List[ScriptScene] = Field(default_factory=list)


# =========================================================================
# Jobs & batches
# =========================================================================

class GenerationJob(BaseModel):
    """
    단위 작업 레코드.

    pending → in_progress 한 번, in_progress → completed|failed 한 번.
    종료 상태는 다시 바뀌지 않습니다.
    """
    job_id: str
    index: int = 0
    status: JobStatus = JobStatus.PENDING
    artifact: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)

    def start(self):
        if self.status != JobStatus.PENDING:
            raise InvalidTransitionError(f"Job {self.job_id}: cannot start from {self.status.value}")
        self.status = JobStatus.IN_PROGRESS

    def complete(self, artifact: str):
        self._require_in_progress("complete")
        self.artifact = artifact
        self.status = JobStatus.COMPLETED

    def fail(self, reason: str):
        self._require_in_progress("fail")
        self.error = reason
        self.status = JobStatus.FAILED

    def _require_in_progress(self, action: str):
        if self.status != JobStatus.IN_PROGRESS:
            raise InvalidTransitionError(f"Job {self.job_id}: cannot {action} from {self.status.value}")


class ItemResult(BaseModel):
    """success-with-artifact | failure-with-reason"""
    index: int
    artifact: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.artifact is not None


class BatchRun(BaseModel):
    """같이 실행된 작업 묶음. 부분 성공도 유효한 종료 상태."""
    run_id: str
    quantity: int
    window: int
    jobs: List[GenerationJob] = Field(default_factory=list)
    groups: List[List[int]] = Field(default_factory=list)

    @property
    def expected_groups(self) -> int:
        return math.ceil(self.quantity / self.window) if self.quantity else 0

    @property
    def artifacts(self) -> List[str]:
        return [j.artifact for j in self.jobs if j.status == JobStatus.COMPLETED]

    @property
    def results(self) -> List[ItemResult]:
        return [ItemResult(index=j.index, artifact=j.artifact, error=j.error) for j in self.jobs]

    @property
    def outcome(self) -> BatchOutcome:
        produced = len(self.artifacts)
        if produced == 0:
            return BatchOutcome.FAILED
        if produced < len(self.jobs):
            return BatchOutcome.PARTIAL
        return BatchOutcome.COMPLETED

    def raise_for_total_failure(self, message: str = "No artifact generated"):
        """Zero artifacts across all items → TotalFailureError."""
        if self.outcome == BatchOutcome.FAILED:
            from agents.errors import TotalFailureError
            raise TotalFailureError(message, run=self)


# =========================================================================
# Storyboard
# =========================================================================

class StoryboardScene(BaseModel):
    """사용자가 만든 씬: 이미지 + 모션 프롬프트"""
    scene_id: str
    image: Optional[TaggedImage] = None
    motion_prompt: str = ""

    @property
    def has_required_input(self) -> bool:
        return self.image is not None


class SceneVideoResult(BaseModel):
    scene_id: str
    video_url: str = ""
    status: SceneStatus = SceneStatus.GENERATING
    error: Optional[str] = None


class StoryboardRun(BaseModel):
    """씬별 결과 슬롯. 슬롯은 generating → completed|failed 로 한 번만 갱신."""
    results: List[SceneVideoResult] = Field(default_factory=list)
    error_message: Optional[str] = Field(default=None, description="dismissible banner text")
    credential_reset_requested: bool = False

    def slot(self, scene_id: str) -> SceneVideoResult:
        for result in self.results:
            if result.scene_id == scene_id:
                return result
        raise KeyError(scene_id)

    def settle(self, scene_id: str, video_url: Optional[str], error: Optional[str] = None) -> SceneVideoResult:
        return self._settle(self.slot(scene_id), video_url, error)

    def settle_at(self, position: int, video_url: Optional[str], error: Optional[str] = None) -> SceneVideoResult:
        """Settle the slot at `position` (slots are fixed at run start, in scene order)."""
        return self._settle(self.results[position], video_url, error)

    @staticmethod
    def _settle(result: SceneVideoResult, video_url: Optional[str], error: Optional[str]) -> SceneVideoResult:
        scene_id = result.scene_id
        if result.status != SceneStatus.GENERATING:
            raise InvalidTransitionError(f"Scene {scene_id} already {result.status.value}")
        result.video_url = video_url or ""
        result.status = SceneStatus.COMPLETED if video_url else SceneStatus.FAILED
        result.error = error
        return result

    @property
    def completed(self) -> List[SceneVideoResult]:
        return [r for r in self.results if r.status == SceneStatus.COMPLETED]

    @property
    def is_total_failure(self) -> bool:
        return bool(self.results) and not self.completed
