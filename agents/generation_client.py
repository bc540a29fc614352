"""
Generation Client: the only component that talks to the Gemini / Veo backend.

Job kinds:
- analysis: 제품 이미지 분석 (JSON)
- text prompt: 크리에이티브 프롬프트 / 스토리보드 스크립트 / 벌크 변형 (text, JSON)
- image synthesis: Gemini Flash Image → data URI
- video synthesis: Veo 3.1 image-to-video → 작업 핸들 폴링 → video URI

파싱 정책:
- 분석/스크립트처럼 참고용 결과는 파싱 실패 시 고정 fallback 값을 반환 (예외 없음)
- 합성 작업이 결과물을 만들지 못하면 NoArtifactError로 명시적으로 실패
"""

from typing import Any, Callable, Dict, List, Optional, Type, Union
from urllib.parse import urlencode

from google import genai
from google.genai import types
from pydantic import BaseModel, TypeAdapter, ValidationError

from schemas import (
    AnalysisResult,
    GenerationRequest,
    JobKind,
    PhotoVariation,
    VideoScene,
    VideoScript,
)
from agents.credentials import CredentialProvider, EnvCredentialProvider
from agents.errors import CredentialError, NoArtifactError
from agents.video_poller import VideoJobPoller
from utils.constants import (
    CREATIVE_PROMPT_FALLBACK,
    MODEL_GEMINI_IMAGE,
    MODEL_GEMINI_TEXT,
    MODEL_VEO_VIDEO,
    VIDEO_RESOLUTION,
)
from utils.error_manager import ErrorManager
from utils.images import to_data_uri
from utils.llm_utils import parse_llm_json
from utils.logger import get_logger
logger = get_logger("generation_client")


# =========================================================================
# Response schemas (Gemini JSON mode)
# =========================================================================

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "description": {"type": "STRING"},
        "usp": {"type": "STRING"},
        "productCategory": {"type": "STRING"},
        "targetGender": {"type": "STRING"},
    },
}

VIDEO_SCRIPT_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "sceneNumber": {"type": "INTEGER"},
            "shotType": {"type": "STRING"},
            "cameraAngle": {"type": "STRING"},
            "actionDescription": {"type": "STRING"},
            "visualPrompt": {"type": "STRING"},
            "voiceOver": {"type": "STRING"},
            "duration": {"type": "NUMBER"},
        },
    },
}

BULK_PHOTO_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "variationId": {"type": "INTEGER"},
            "prompt": {"type": "STRING"},
        },
    },
}

BULK_VIDEO_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "scriptId": {"type": "INTEGER"},
            "conceptName": {"type": "STRING"},
            "scenes": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "sceneNumber": {"type": "INTEGER"},
                        "visualPrompt": {"type": "STRING"},
                        "voiceOver": {"type": "STRING"},
                    },
                },
            },
        },
    },
}

ClientFactory = Callable[[str], Any]


def _default_client_factory(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def authorized_download_url(uri: str, api_key: str) -> str:
    """Veo file URIs need the API key as a query param to be fetched."""
    if "key=" in uri:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{urlencode({'key': api_key})}"


class GenerationClient:
    """
    Gemini / Veo 호출 래퍼

    매 호출마다 credential provider에서 키를 새로 읽고 클라이언트를 새로 만듭니다.
    (세션 중 키가 교체되어도 재시작 없이 다음 호출부터 반영)
    """

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        client_factory: Optional[ClientFactory] = None,
        models: Optional[Dict[str, str]] = None,
        poller: Optional[VideoJobPoller] = None,
        video_resolution: str = VIDEO_RESOLUTION,
    ):
        """
        Args:
            credentials: key source (default: GOOGLE_API_KEY from env)
            client_factory: api_key → genai.Client (injectable for tests)
            models: {"text", "image", "video"} model name overrides
            poller: Veo operation poller
            video_resolution: Veo output resolution
        """
        self.credentials = credentials or EnvCredentialProvider()
        self._client_factory = client_factory or _default_client_factory
        models = models or {}
        self.text_model = models.get("text", MODEL_GEMINI_TEXT)
        self.image_model = models.get("image", MODEL_GEMINI_IMAGE)
        self.video_model = models.get("video", MODEL_VEO_VIDEO)
        self.poller = poller or VideoJobPoller()
        self.video_resolution = video_resolution

    def _client(self):
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise CredentialError("No API key selected")
        return self._client_factory(api_key)

    @staticmethod
    def _contents(request: GenerationRequest) -> List[Union[types.Part, str]]:
        parts: List[Union[types.Part, str]] = [
            types.Part.from_bytes(data=img.data, mime_type=img.mime_type)
            for img in request.images
        ]
        parts.append(request.instruction)
        return parts

    @staticmethod
    def _expect(request: GenerationRequest, *kinds: JobKind):
        if request.kind not in kinds:
            expected = ", ".join(k.value for k in kinds)
            raise ValueError(f"Request kind {request.kind.value} not valid here (expected {expected})")

    async def _generate_json(self, request: GenerationRequest, schema: Dict[str, Any]) -> str:
        client = self._client()
        response = await client.aio.models.generate_content(
            model=self.text_model,
            contents=self._contents(request),
            config=types.GenerateContentConfig(
                system_instruction=request.system_instruction,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return response.text or ""

    def _parse_or_fallback(self, text: str, target: Any, fallback: Any, label: str):
        """Advisory paths degrade to `fallback` instead of raising."""
        try:
            data = parse_llm_json(text)
            if isinstance(target, type) and issubclass(target, BaseModel):
                return target.model_validate(data)
            return TypeAdapter(target).validate_python(data)
        except (ValueError, ValidationError) as e:
            ErrorManager.log_error(
                "GenerationClient",
                f"{label} response could not be parsed, using fallback",
                details=e,
                severity="warning",
            )
            return fallback

    # =========================================================================
    # Analysis / text jobs
    # =========================================================================

    async def analyze_product(self, request: GenerationRequest) -> AnalysisResult:
        """제품 이미지 분석. 파싱 실패 → AnalysisResult.fallback()"""
        self._expect(request, JobKind.ANALYSIS)
        logger.info("[GenerationClient] Analyzing product image...")
        text = await self._generate_json(request, ANALYSIS_SCHEMA)
        return self._parse_or_fallback(text, AnalysisResult, AnalysisResult.fallback(), "Analysis")

    async def generate_creative_prompt(self, request: GenerationRequest) -> str:
        self._expect(request, JobKind.TEXT_PROMPT)
        client = self._client()
        response = await client.aio.models.generate_content(
            model=self.text_model,
            contents=request.instruction,
            config=types.GenerateContentConfig(system_instruction=request.system_instruction),
        )
        return response.text or CREATIVE_PROMPT_FALLBACK

    async def generate_video_script(self, request: GenerationRequest) -> List[VideoScene]:
        """스토리보드 스크립트. 파싱 실패 → []"""
        self._expect(request, JobKind.TEXT_PROMPT)
        text = await self._generate_json(request, VIDEO_SCRIPT_SCHEMA)
        return self._parse_or_fallback(text, List[VideoScene], [], "Video script")

    async def generate_bulk_variations(
        self, request: GenerationRequest, mode: str
    ) -> Union[List[PhotoVariation], List[VideoScript]]:
        """mode "photo" → 이미지 프롬프트 목록, "video" → 스크립트 목록. 파싱 실패 → []"""
        self._expect(request, JobKind.BULK_VARIATION)
        target: Type
        if mode == "photo":
            schema, target = BULK_PHOTO_SCHEMA, List[PhotoVariation]
        elif mode == "video":
            schema, target = BULK_VIDEO_SCHEMA, List[VideoScript]
        else:
            raise ValueError(f"Unknown bulk mode: {mode}")
        text = await self._generate_json(request, schema)
        return self._parse_or_fallback(text, target, [], f"Bulk {mode}")

    # =========================================================================
    # Synthesis jobs
    # =========================================================================

    async def synthesize_image(self, request: GenerationRequest) -> str:
        """
        Single image synthesis.

        Returns:
            `data:image/png;base64,...` of the first inline image part

        Raises:
            NoArtifactError: response carried no image
        """
        self._expect(request, JobKind.IMAGE_SYNTHESIS)
        config = None
        if request.aspect_ratio is not None:
            config = types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=request.aspect_ratio.value),
            )
        client = self._client()
        response = await client.aio.models.generate_content(
            model=self.image_model,
            contents=self._contents(request),
            config=config,
        )

        candidates = getattr(response, "candidates", None) or []
        content = getattr(candidates[0], "content", None) if candidates else None
        for part in (getattr(content, "parts", None) or []):
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return to_data_uri(inline.data, "image/png")
        raise NoArtifactError("Image model returned no image")

    async def synthesize_video(self, request: GenerationRequest) -> str:
        """
        Veo image-to-video. The first request image is the start frame.

        Returns:
            video URI exactly as reported by the backend
        """
        self._expect(request, JobKind.VIDEO_SYNTHESIS)
        if not request.images:
            raise ValueError("Video synthesis needs a start frame image")
        frame = request.images[0]
        client = self._client()

        logger.info(f"[GenerationClient] Submitting Veo job ({self.video_model})...")
        operation = await client.aio.models.generate_videos(
            model=self.video_model,
            prompt=request.instruction,
            image=types.Image(image_bytes=frame.data, mime_type=frame.mime_type),
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                resolution=self.video_resolution,
                aspect_ratio=request.aspect_ratio.value if request.aspect_ratio else None,
            ),
        )

        async def refresh(op):
            return await client.aio.operations.get(op)

        return await self.poller.wait(operation, refresh)
