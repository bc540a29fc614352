"""
ADSTUDIO Data Models (Pydantic Schemas)
"""

from .models import (
    JobKind,
    JobStatus,
    SceneStatus,
    BatchOutcome,
    AspectRatio,
    VIDEO_ASPECT_RATIOS,
    COMPOSITE_ASPECT_RATIOS,
    validate_aspect_ratio,
    InvalidTransitionError,
    DraftLockedError,
    TaggedImage,
    BrandProfile,
    GenerationRequest,
    RetryPolicy,
    AnalysisResult,
    VideoScene,
    PhotoVariation,
    ScriptScene,
    VideoScript,
    GenerationJob,
    ItemResult,
    BatchRun,
    StoryboardScene,
    SceneVideoResult,
    StoryboardRun,
)

__all__ = [
    "JobKind",
    "JobStatus",
    "SceneStatus",
    "BatchOutcome",
    "AspectRatio",
    "VIDEO_ASPECT_RATIOS",
    "COMPOSITE_ASPECT_RATIOS",
    "validate_aspect_ratio",
    "InvalidTransitionError",
    "DraftLockedError",
    "TaggedImage",
    "BrandProfile",
    "GenerationRequest",
    "RetryPolicy",
    "AnalysisResult",
    "VideoScene",
    "PhotoVariation",
    "ScriptScene",
    "VideoScript",
    "GenerationJob",
    "ItemResult",
    "BatchRun",
    "StoryboardScene",
    "SceneVideoResult",
    "StoryboardRun",
]
