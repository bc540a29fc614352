"""
Studio Agent: batched photo flows.

- Studio shot: 제품 이미지 1장 → 스튜디오 촬영 컷 N장
- Composite: 태그된 이미지 여러 장 → 합성 컷 N장

두 흐름 모두 BatchOrchestrator로 window 단위 병렬 실행하고,
성공한 결과만 순서대로 반환합니다. 하나도 없으면 TotalFailureError.
"""

from typing import List, Optional, Sequence

from schemas import (
    BrandProfile,
    COMPOSITE_ASPECT_RATIOS,
    GenerationRequest,
    TaggedImage,
    VIDEO_ASPECT_RATIOS,
    validate_aspect_ratio,
)
from agents.batch_orchestrator import BatchOrchestrator, SettledCallback
from agents.generation_client import GenerationClient
from utils.constants import BATCH_WINDOW, COMPOSITE_TOTAL_FAILURE, STUDIO_TOTAL_FAILURE
from utils.prompt_builder import (
    COMPOSITE_VARIATION_NOTE,
    STUDIO_VARIATION_NOTE,
    CreativePromptBuilder,
)
from utils.logger import get_logger
logger = get_logger("studio_agent")


class StudioAgent:
    """
    스튜디오 / 합성 이미지 배치 생성 에이전트
    """

    def __init__(
        self,
        client: GenerationClient,
        window: int = BATCH_WINDOW,
        on_item_settled: Optional[SettledCallback] = None,
    ):
        self.client = client
        self.window = window
        self.on_item_settled = on_item_settled

    async def _run_variations(
        self,
        base: GenerationRequest,
        note: str,
        failure_message: str,
        service: str,
    ) -> List[str]:
        async def produce(index: int) -> str:
            prompt = CreativePromptBuilder.variation_prompt(base.instruction, index, note)
            return await self.client.synthesize_image(base.with_instruction(prompt))

        orchestrator = BatchOrchestrator(self.window, self.on_item_settled, service=service)
        run = await orchestrator.run(base.quantity, produce)
        run.raise_for_total_failure(failure_message)
        return run.artifacts

    async def generate_studio_images(
        self,
        image: TaggedImage,
        style: str,
        aspect_ratio: str,
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> List[str]:
        """
        Studio photography shots of one product.

        Args:
            image: product image
            style: studio style name
            aspect_ratio: 1:1, 9:16 or 16:9
            brand: optional brand profile
            quantity: number of shots

        Returns:
            data URIs of the shots that succeeded, in index order

        Raises:
            TotalFailureError: no shot was produced
        """
        ratio = validate_aspect_ratio(aspect_ratio, VIDEO_ASPECT_RATIOS)
        logger.info(f"[StudioAgent] Studio shots x{quantity} ({style}, {ratio.value})")
        request = CreativePromptBuilder.studio_request(image, style, ratio, brand, quantity)
        return await self._run_variations(request, STUDIO_VARIATION_NOTE, STUDIO_TOTAL_FAILURE, "StudioShots")

    async def generate_composite_images(
        self,
        images: Sequence[TaggedImage],
        instruction: str,
        aspect_ratio: str,
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> List[str]:
        """
        Composite several tagged images into one scene, `quantity` times.

        Raises:
            TotalFailureError: no composite was produced
        """
        ratio = validate_aspect_ratio(aspect_ratio, COMPOSITE_ASPECT_RATIOS)
        logger.info(f"[StudioAgent] Composites x{quantity} from {len(images)} image(s) ({ratio.value})")
        request = CreativePromptBuilder.composite_request(images, instruction, ratio, brand, quantity)
        return await self._run_variations(request, COMPOSITE_VARIATION_NOTE, COMPOSITE_TOTAL_FAILURE, "Composites")
