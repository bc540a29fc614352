"""
Video Job Poller: waits for a long-running Veo operation.

in-flight ──(sleep interval, refresh)──▶ in-flight ... ──▶ done
On done the video URI is read from the operation result; a done operation
without a URI is a failure, not a success.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from schemas import RetryPolicy
from agents.errors import GenerationError, NoArtifactError, PollTimeoutError
from utils.logger import get_logger
logger = get_logger("video_poller")


def extract_video_uri(operation: Any) -> Optional[str]:
    """operation.response.generated_videos[0].video.uri, or None."""
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) if response is not None else None
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None) if video is not None else None


class VideoJobPoller:
    """
    Polls an operation handle until the backend reports done.

    Args:
        policy: interval and optional bounds. Default is 5s, unbounded.
        sleep: awaitable sleep (injectable for tests)
        clock: monotonic seconds source for timeout_sec
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._clock = clock

    async def wait(
        self,
        operation: Any,
        refresh: Callable[[Any], Awaitable[Any]],
    ) -> str:
        """
        Poll until done and return the video URI.

        Args:
            operation: handle returned by generate_videos
            refresh: re-fetches the handle's status

        Returns:
            backend video URI, unmodified

        Raises:
            PollTimeoutError: policy bound exceeded
            GenerationError: operation finished with an error
            NoArtifactError: operation finished without a video
        """
        policy = self.policy
        started = self._clock()
        attempts = 0

        while not operation.done:
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise PollTimeoutError(f"Video operation not done after {attempts} checks")
            if policy.timeout_sec is not None and self._clock() - started >= policy.timeout_sec:
                raise PollTimeoutError(f"Video operation not done after {policy.timeout_sec:.0f}s")

            await self._sleep(policy.interval_sec)
            attempts += 1
            operation = await refresh(operation)
            logger.debug(f"[VideoPoller] check #{attempts}: done={bool(operation.done)}")

        error = getattr(operation, "error", None)
        if error:
            raise GenerationError(f"Video generation failed: {error}")

        video_uri = extract_video_uri(operation)
        if not video_uri:
            raise NoArtifactError("Video operation completed without a video URI")

        logger.info(f"[VideoPoller] Generation complete after {attempts} checks")
        return video_uri
