"""
ADSTUDIO 통합 파이프라인

UI(또는 CLI)가 사용하는 단일 진입점. 설정 → credential → GenerationClient → 오케스트레이터를 조립합니다.

제공 기능:
1. analyze - 제품 이미지 분석
2. creative_prompt / video_script / bulk_variations - 텍스트 프롬프트 생성
3. studio_shots / composites - window 배치 이미지 생성
4. scene_visual - 스토리보드 씬 스틸 이미지
5. storyboard - 씬별 Veo 비디오 생성
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from config import (
    get_batch_window,
    get_model_config,
    get_poll_policy,
    load_studio_settings,
    merge_studio_settings,
)
from schemas import (
    AnalysisResult,
    BrandProfile,
    StoryboardRun,
    StoryboardScene,
    TaggedImage,
    VIDEO_ASPECT_RATIOS,
    VideoScene,
    validate_aspect_ratio,
)
from agents import (
    CredentialProvider,
    EnvCredentialProvider,
    GenerationClient,
    StoryboardDraft,
    StoryboardOrchestrator,
    StudioAgent,
    VideoJobPoller,
)
from agents.batch_orchestrator import SettledCallback
from agents.storyboard import UpdateCallback
from utils.prompt_builder import CreativePromptBuilder
from utils.logger import get_logger
logger = get_logger("pipeline")


class StudioPipeline:
    """
    ADSTUDIO 통합 파이프라인

    Args:
        credentials: key provider (default: env var from settings)
        settings: studio settings dict, merged over the defaults (default: config/studio.yaml)
        client_factory: api_key → genai client, for tests
        on_item_settled: batch item callback (photo flows)
        on_scene_update: storyboard scene callback
    """

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        settings: Optional[Dict[str, Any]] = None,
        client_factory=None,
        poller: Optional[VideoJobPoller] = None,
        on_item_settled: Optional[SettledCallback] = None,
        on_scene_update: Optional[UpdateCallback] = None,
    ):
        self.settings = merge_studio_settings(settings) if settings else load_studio_settings()
        self.credentials = credentials or EnvCredentialProvider(self.settings["credentials"]["env_var"])
        self.client = GenerationClient(
            credentials=self.credentials,
            client_factory=client_factory,
            models=get_model_config(self.settings),
            poller=poller or VideoJobPoller(get_poll_policy(self.settings)),
            video_resolution=self.settings["video"]["resolution"],
        )
        self.studio = StudioAgent(self.client, get_batch_window(self.settings), on_item_settled)
        self.storyboard_orchestrator = StoryboardOrchestrator(self.client, self.credentials, on_scene_update)
        # instruction strings for UI preview (pure, no backend call)
        self.prompts = CreativePromptBuilder

    def new_storyboard(self) -> StoryboardDraft:
        return StoryboardDraft(max_scenes=self.settings["storyboard"]["max_scenes"])

    # =========================================================================
    # Text / analysis
    # =========================================================================

    async def analyze(self, product_image: TaggedImage) -> AnalysisResult:
        return await self.client.analyze_product(CreativePromptBuilder.analysis_request(product_image))

    async def creative_prompt(
        self,
        product_description: str,
        model_type: str,
        mood: str,
        pose: str,
        background: str,
        brand: Optional[BrandProfile] = None,
        analysis: Optional[AnalysisResult] = None,
    ) -> str:
        request = CreativePromptBuilder.creative_prompt_request(
            product_description, model_type, mood, pose, background, brand, analysis,
        )
        return await self.client.generate_creative_prompt(request)

    async def video_script(
        self,
        product_description: str,
        usp: str,
        mood: str,
        scene_count: int,
        brand: Optional[BrandProfile] = None,
    ) -> List[VideoScene]:
        request = CreativePromptBuilder.video_script_request(product_description, usp, mood, scene_count, brand)
        return await self.client.generate_video_script(request)

    async def bulk_variations(self, mode: str, quantity: int, **base_data) -> list:
        """base_data: product_description, mood, pose, model_description, scene_count, usp"""
        request = CreativePromptBuilder.bulk_variation_request(mode, quantity, **base_data)
        return await self.client.generate_bulk_variations(request, mode)

    # =========================================================================
    # Synthesis
    # =========================================================================

    async def studio_shots(
        self,
        product_image: TaggedImage,
        style: str,
        aspect_ratio: str = "1:1",
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> List[str]:
        return await self.studio.generate_studio_images(product_image, style, aspect_ratio, brand, quantity)

    async def composites(
        self,
        images: Sequence[TaggedImage],
        instruction: str,
        aspect_ratio: str = "9:16",
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> List[str]:
        return await self.studio.generate_composite_images(images, instruction, aspect_ratio, brand, quantity)

    async def scene_visual(
        self,
        scene_prompt: str,
        aspect_ratio: str = "9:16",
        product_image: Optional[TaggedImage] = None,
        model_image: Optional[TaggedImage] = None,
    ) -> str:
        ratio = validate_aspect_ratio(aspect_ratio, VIDEO_ASPECT_RATIOS)
        request = CreativePromptBuilder.scene_visual_request(scene_prompt, ratio, product_image, model_image)
        return await self.client.synthesize_image(request)

    async def storyboard(
        self,
        scenes: Union[StoryboardDraft, Sequence[StoryboardScene]],
        aspect_ratio: str = "9:16",
        brand: Optional[BrandProfile] = None,
    ) -> StoryboardRun:
        return await self.storyboard_orchestrator.generate(scenes, aspect_ratio, brand)
