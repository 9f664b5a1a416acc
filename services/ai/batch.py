"""
Batch processing of AI requests.

Jobs and their queued requests live in process memory only; nothing survives
a restart and callers get no ordering guarantee across jobs.
"""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import anyio

from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import utcnow
from services.ai.realtime import RealTimeAIProcessor, generate_request_id, realtime_processor

logger = logging.getLogger("homehub.ai.batch")

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"
CANCELLED = "cancelled"


@dataclass
class BatchConfig:
    max_concurrent_requests: int = 5
    batch_size: int = 10
    retry_delay: int = 1000  # milliseconds, multiplied by the attempt number
    max_retries: int = 3
    timeout: int = 30000  # milliseconds per request attempt
    enable_parallel_processing: bool = True
    enable_retry: bool = True
    enable_fallback: bool = True

    @property
    def chunk_size(self) -> int:
        return max(1, min(self.batch_size, self.max_concurrent_requests))


@dataclass
class BatchRequest:
    type: str
    context: Dict[str, Any]
    user_id: UUID
    household_id: UUID
    priority: str = "medium"
    id: str = field(default_factory=lambda: generate_request_id("req"))
    created_at: datetime = field(default_factory=utcnow)
    retry_count: int = 0


@dataclass
class BatchResult:
    id: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    processing_time: float = 0.0
    provider: str = "error"
    fallback_used: bool = False
    attempts: int = 1
    completed_at: datetime = field(default_factory=utcnow)


@dataclass
class BatchJob:
    name: str
    description: str
    requests: List[BatchRequest]
    id: str = field(default_factory=lambda: generate_request_id("batch"))
    status: str = PENDING
    created_at: datetime = field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_processing_time: float = 0.0
    results: List[BatchResult] = field(default_factory=list)

    def owned_by(self, user_id: UUID) -> bool:
        return any(r.user_id == user_id for r in self.requests)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BatchProcessor:
    """
    Queue AI requests into jobs and run them in fixed-size parallel chunks.

    A request is processed at most once per process_batch_job call: the job's
    requests are taken off the queue before processing starts, and failed
    attempts are retried inline instead of being re-queued.
    """

    def __init__(
        self,
        config: Optional[BatchConfig] = None,
        dispatcher: Optional[RealTimeAIProcessor] = None,
    ):
        self.config = config or BatchConfig()
        self.dispatcher = dispatcher or realtime_processor
        self._jobs: Dict[str, BatchJob] = {}
        self._queue: List[BatchRequest] = []

    def create_batch_job(
        self, name: str, description: str, requests: List[BatchRequest]
    ) -> BatchJob:
        if not name:
            raise ServiceValidationError("Batch job name is required")
        if not requests:
            raise ServiceValidationError("Batch job needs at least one request")

        job = BatchJob(
            name=name,
            description=description or "",
            requests=list(requests),
            total_requests=len(requests),
        )
        self._jobs[job.id] = job
        self._queue.extend(job.requests)

        logger.info(f"Created batch job {job.id} with {job.total_requests} requests")
        return job

    async def process_batch_job(self, job_id: str) -> BatchJob:
        """
        Run every request of a pending job.

        Raises:
            NotFoundError: If the job does not exist
            ServiceValidationError: If the job is not pending
        """
        job = self.get_batch_job(job_id)
        if job.status != PENDING:
            raise ServiceValidationError(f"Batch job {job_id} is not in pending status")

        job.status = PROCESSING
        job.started_at = utcnow()
        self._dequeue(job)
        logger.info(f"Starting batch job {job_id} ({job.total_requests} requests)")

        results: List[BatchResult] = []
        try:
            chunk_size = self.config.chunk_size
            for start in range(0, len(job.requests), chunk_size):
                if job.status == CANCELLED:
                    break
                chunk = job.requests[start : start + chunk_size]
                if self.config.enable_parallel_processing:
                    results.extend(await asyncio.gather(*(self._run(r) for r in chunk)))
                else:
                    for request in chunk:
                        results.append(await self._run(request))
        except Exception as e:
            job.status = FAILED
            job.completed_at = utcnow()
            logger.error(f"Batch job {job_id} failed: {e}")
            raise

        job.results = results
        job.successful_requests = sum(1 for r in results if r.success)
        job.failed_requests = sum(1 for r in results if not r.success)
        job.average_processing_time = (
            round(sum(r.processing_time for r in results) / len(results), 2) if results else 0.0
        )
        job.completed_at = utcnow()
        if job.status != CANCELLED:
            job.status = COMPLETED if job.failed_requests == 0 else FAILED

        logger.info(
            f"Batch job {job_id} {job.status}: "
            f"{job.successful_requests}/{job.total_requests} succeeded"
        )
        return job

    async def _run(self, request: BatchRequest) -> BatchResult:
        """Process one request, retrying inline with a linear backoff."""
        max_retries = self.config.max_retries if self.config.enable_retry else 0
        start = time.perf_counter()

        while True:
            try:
                with anyio.fail_after(self.config.timeout / 1000):
                    data, provider, fallback_used = await self.dispatcher.dispatch(
                        request.type, request.context, request.household_id
                    )
                if fallback_used and not self.config.enable_fallback:
                    raise RuntimeError("Mock fallback is disabled for batch processing")
                return BatchResult(
                    id=request.id,
                    success=True,
                    data=data,
                    provider=provider,
                    fallback_used=fallback_used,
                    processing_time=round((time.perf_counter() - start) * 1000, 2),
                    attempts=request.retry_count + 1,
                )
            except Exception as e:
                error = "Request timed out" if isinstance(e, TimeoutError) else str(e)
                if request.retry_count >= max_retries:
                    logger.error(f"Batch request {request.id} failed: {error}")
                    return BatchResult(
                        id=request.id,
                        success=False,
                        error=error,
                        processing_time=round((time.perf_counter() - start) * 1000, 2),
                        attempts=request.retry_count + 1,
                    )
                request.retry_count += 1
                logger.warning(
                    f"Retrying batch request {request.id} "
                    f"(attempt {request.retry_count}/{max_retries}): {error}"
                )
                await anyio.sleep(self.config.retry_delay * request.retry_count / 1000)

    def cancel_batch_job(self, job_id: str) -> bool:
        job = self._jobs.get(job_id)
        if not job or job.status not in (PENDING, PROCESSING):
            return False

        job.status = CANCELLED
        job.completed_at = utcnow()
        self._dequeue(job)
        logger.warning(f"Batch job {job_id} cancelled")
        return True

    def _dequeue(self, job: BatchJob) -> None:
        ids = {r.id for r in job.requests}
        self._queue = [r for r in self._queue if r.id not in ids]

    def get_batch_job(self, job_id: str) -> BatchJob:
        job = self._jobs.get(job_id)
        if not job:
            raise NotFoundError(f"Batch job {job_id} not found")
        return job

    def get_all_batch_jobs(self) -> List[BatchJob]:
        return list(self._jobs.values())

    def update_config(self, **changes) -> BatchConfig:
        known = {f.name for f in fields(BatchConfig)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ServiceValidationError(
                "Unknown batch config keys", details={"keys": unknown}
            )
        self.config = replace(self.config, **changes)
        logger.info(f"Batch processing config updated: {asdict(self.config)}")
        return self.get_config()

    def get_config(self) -> BatchConfig:
        return replace(self.config)

    def get_processing_queue(self) -> List[BatchRequest]:
        return list(self._queue)

    def get_queue_size(self) -> int:
        return len(self._queue)

    def clear_queue(self) -> None:
        self._queue = []
        logger.info("Batch processing queue cleared")


batch_processor = BatchProcessor()
