"""
Storyboard: scene editing + per-scene Veo generation.

- StoryboardDraft: 편집 가능한 씬 목록 (최대 5개, 최소 1개). 생성 중에는 잠김.
- StoryboardOrchestrator: 이미지가 있는 씬만 골라 모두 동시에 Veo 호출 (배치 window 없음).
  씬별 상태(generating → completed|failed)를 독립적으로 갱신하고 완료될 때마다 콜백.
- 키 오류("Requested entity was not found")는 한 번만 키 재선택을 요청하고 배너 메시지를 남김.
"""

import asyncio
import inspect
import uuid
from contextlib import contextmanager
from typing import Any, Callable, List, Optional, Sequence, Union

from schemas import (
    BrandProfile,
    DraftLockedError,
    SceneStatus,
    SceneVideoResult,
    StoryboardRun,
    StoryboardScene,
    VIDEO_ASPECT_RATIOS,
    validate_aspect_ratio,
)
from agents.credentials import CredentialProvider, ensure_credential, request_selection
from agents.errors import CredentialError, NoEligibleScenesError, is_credential_error
from agents.generation_client import GenerationClient
from utils.constants import CREDENTIAL_ADVISORY, MAX_STORYBOARD_SCENES, UNEXPECTED_ERROR_BANNER
from utils.error_manager import ErrorManager
from utils.prompt_builder import CreativePromptBuilder
from utils.logger import get_logger
logger = get_logger("storyboard")

UpdateCallback = Callable[[StoryboardRun, SceneVideoResult], Any]

_UNSET = object()


class StoryboardDraft:
    """편집 중인 씬 시퀀스"""

    def __init__(self, max_scenes: int = MAX_STORYBOARD_SCENES):
        self.max_scenes = max_scenes
        self._scenes: List[StoryboardScene] = [StoryboardScene(scene_id="1")]
        self._locked = False

    @property
    def scenes(self) -> List[StoryboardScene]:
        return list(self._scenes)

    @property
    def is_locked(self) -> bool:
        return self._locked

    def _check_unlocked(self):
        if self._locked:
            raise DraftLockedError("Storyboard is being generated; edits are frozen")

    def add_scene(self) -> Optional[StoryboardScene]:
        """Append an empty scene. No-op at the scene limit."""
        self._check_unlocked()
        if len(self._scenes) >= self.max_scenes:
            return None
        scene = StoryboardScene(scene_id=uuid.uuid4().hex[:12])
        self._scenes.append(scene)
        return scene

    def remove_scene(self, scene_id: str) -> bool:
        """Remove a scene. The last remaining scene is kept."""
        self._check_unlocked()
        if len(self._scenes) <= 1:
            return False
        before = len(self._scenes)
        self._scenes = [s for s in self._scenes if s.scene_id != scene_id]
        return len(self._scenes) != before

    def update_scene(self, scene_id: str, image: Any = _UNSET, motion_prompt: Optional[str] = None) -> StoryboardScene:
        """Replace the image and/or motion prompt of one scene (image=None clears it)."""
        self._check_unlocked()
        changes = {}
        if image is not _UNSET:
            changes["image"] = image
        if motion_prompt is not None:
            changes["motion_prompt"] = motion_prompt
        for i, scene in enumerate(self._scenes):
            if scene.scene_id == scene_id:
                updated = scene.model_copy(update=changes)
                self._scenes[i] = updated
                return updated
        raise KeyError(scene_id)

    @contextmanager
    def locked(self):
        """Freeze edits for the duration of a generation run."""
        self._locked = True
        try:
            yield tuple(self._scenes)
        finally:
            self._locked = False


class StoryboardOrchestrator:
    """
    씬별 비디오 생성 오케스트레이터

    Args:
        client: GenerationClient
        credentials: key provider for the pre-run gate and re-selection
            (None → assume ready)
        on_update: called with (run, result) each time a scene settles
    """

    def __init__(
        self,
        client: GenerationClient,
        credentials: Optional[CredentialProvider] = None,
        on_update: Optional[UpdateCallback] = None,
    ):
        self.client = client
        self.credentials = credentials
        self.on_update = on_update

    async def generate(
        self,
        scenes: Union[StoryboardDraft, Sequence[StoryboardScene]],
        aspect_ratio: str = "9:16",
        brand: Optional[BrandProfile] = None,
    ) -> StoryboardRun:
        """
        Generate one video per scene that has an image.

        Returns:
            StoryboardRun with one slot per eligible scene, in scene order

        Raises:
            NoEligibleScenesError: no scene has an image
            CredentialError: the credential gate failed
        """
        ratio = validate_aspect_ratio(aspect_ratio, VIDEO_ASPECT_RATIOS)
        if isinstance(scenes, StoryboardDraft):
            with scenes.locked() as frozen:
                return await self._generate(frozen, ratio, brand)
        return await self._generate(tuple(scenes), ratio, brand)

    async def _generate(self, scenes, ratio, brand) -> StoryboardRun:
        eligible = [s for s in scenes if s.has_required_input]
        if not eligible:
            raise NoEligibleScenesError("Please upload an image for at least one scene.")

        if not await ensure_credential(self.credentials):
            raise CredentialError("Credential selection failed")

        run = StoryboardRun(results=[SceneVideoResult(scene_id=s.scene_id) for s in eligible])
        skipped = len(scenes) - len(eligible)
        logger.info(
            f"[Storyboard] Generating {len(eligible)} scene(s) in parallel"
            + (f" ({skipped} without image skipped)" if skipped else "")
        )

        await asyncio.gather(*(
            self._run_scene(run, position, scene, ratio, brand)
            for position, scene in enumerate(eligible)
        ))

        logger.info(f"[Storyboard] {len(run.completed)}/{len(eligible)} scene(s) completed")
        return run

    async def _run_scene(self, run: StoryboardRun, position: int, scene: StoryboardScene, ratio, brand):
        """One scene task. Nothing raised here may take down the sibling scenes."""
        try:
            await self._generate_scene(run, position, scene, ratio, brand)
        except Exception as e:
            ErrorManager.log_error(
                "Storyboard", f"Unexpected error in scene {scene.scene_id}: {e}", severity="critical",
            )
            run.error_message = UNEXPECTED_ERROR_BANNER
            if run.results[position].status == SceneStatus.GENERATING:
                run.settle_at(position, None, error=str(e))

    async def _generate_scene(self, run: StoryboardRun, position: int, scene: StoryboardScene, ratio, brand):
        request = CreativePromptBuilder.video_request(scene.image, scene.motion_prompt, ratio, brand)
        try:
            video_url = await self.client.synthesize_video(request)
        except Exception as e:
            ErrorManager.log_error("Storyboard", f"Scene {scene.scene_id} failed: {e}", details=scene.scene_id)
            if is_credential_error(e):
                await self._handle_credential_error(run)
            result = run.settle_at(position, None, error=str(e))
        else:
            result = run.settle_at(position, video_url)
        await self._notify(run, result)

    async def _handle_credential_error(self, run: StoryboardRun):
        run.error_message = CREDENTIAL_ADVISORY
        if run.credential_reset_requested:
            return
        run.credential_reset_requested = True
        try:
            await request_selection(self.credentials)
        except Exception as e:
            logger.error(f"[Storyboard] Key re-selection failed: {e}")

    async def _notify(self, run: StoryboardRun, result: SceneVideoResult):
        if not self.on_update:
            return
        try:
            outcome = self.on_update(run, result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as cb_err:
            logger.warning(f"[Storyboard] on_update callback error: {cb_err}")

