"""
Batch Orchestrator: fans out N generation calls in fixed-size windows.

- quantity를 window 크기의 연속 그룹으로 분할 (ceil(Q/W) 그룹)
- 그룹 내부는 동시 실행, 그룹 k가 모두 끝나야 그룹 k+1 시작
- 개별 실패는 해당 job의 failed 상태로만 기록, 나머지 진행에는 영향 없음
- 결과가 하나도 없으면 호출자가 raise_for_total_failure()로 전체 실패를 구분
"""

import asyncio
import inspect
import uuid
from typing import Any, Awaitable, Callable, List, Optional

from schemas import BatchRun, GenerationJob
from utils.constants import BATCH_WINDOW
from utils.error_manager import ErrorManager
from utils.logger import get_logger
logger = get_logger("batch_orchestrator")

Producer = Callable[[int], Awaitable[Optional[str]]]
SettledCallback = Callable[[GenerationJob], Any]


def partition(quantity: int, window: int) -> List[List[int]]:
    """[0..quantity) → consecutive groups of at most `window` indices."""
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    return [list(range(start, min(start + window, quantity))) for start in range(0, quantity, window)]


class BatchOrchestrator:
    """
    윈도우 단위 배치 실행기

    Args:
        window: max calls in flight at once
        on_item_settled: called with each job once it reaches a terminal state
        service: name used in logs / the error ledger
    """

    def __init__(
        self,
        window: int = BATCH_WINDOW,
        on_item_settled: Optional[SettledCallback] = None,
        service: str = "BatchOrchestrator",
    ):
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self.window = window
        self.on_item_settled = on_item_settled
        self.service = service

    async def run(self, quantity: int, produce: Producer, run_id: Optional[str] = None) -> BatchRun:
        """
        Run `produce(index)` for every index in [0, quantity).

        Args:
            quantity: number of items
            produce: async factory returning the artifact for one index
            run_id: identity prefix for the jobs (default: random)

        Returns:
            BatchRun with every job in a terminal state
        """
        run_id = run_id or uuid.uuid4().hex[:8]
        run = BatchRun(run_id=run_id, quantity=quantity, window=self.window)
        run.jobs = [GenerationJob(job_id=f"{run_id}-{i + 1}", index=i) for i in range(quantity)]

        groups = partition(quantity, self.window)
        logger.info(f"[{self.service}] {quantity} item(s) in {len(groups)} group(s) of <= {self.window}")

        for group_no, group in enumerate(groups, start=1):
            run.groups.append(list(group))
            await asyncio.gather(*(self._run_item(run.jobs[i], produce) for i in group))
            logger.debug(f"[{self.service}] group {group_no}/{len(groups)} settled")

        logger.info(
            f"[{self.service}] {len(run.artifacts)}/{quantity} produced (outcome: {run.outcome.value})"
        )
        return run

    async def _run_item(self, job: GenerationJob, produce: Producer):
        job.start()
        try:
            artifact = await produce(job.index)
        except Exception as e:
            job.fail(str(e) or type(e).__name__)
            ErrorManager.log_error(self.service, f"Item {job.index + 1} failed: {job.error}", details=job.job_id)
        else:
            if artifact:
                job.complete(artifact)
            else:
                job.fail("no artifact produced")
                ErrorManager.log_error(self.service, f"Item {job.index + 1} produced no artifact", details=job.job_id)
        await self._notify(job)

    async def _notify(self, job: GenerationJob):
        if not self.on_item_settled:
            return
        try:
            result = self.on_item_settled(job)
            if inspect.isawaitable(result):
                await result
        except Exception as cb_err:
            logger.warning(f"[{self.service}] on_item_settled callback error: {cb_err}")
