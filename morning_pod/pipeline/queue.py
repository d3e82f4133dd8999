"""Queue processor that turns queued sources into podcast episodes.

Each queue item moves through scraping, summarizing, generating-audio and
uploading before it is marked completed, or failed once its retries are
used up. The summarize, synthesize and upload steps are supplied by the
caller.
"""

import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from morning_pod.pipeline.scraping import ScrapedContent, ScraperManager

logger = logging.getLogger(__name__)


class QueueStatus(Enum):
    """Lifecycle stages of a queue item."""

    PENDING = "pending"
    SCRAPING = "scraping"
    SUMMARIZING = "summarizing"
    GENERATING_AUDIO = "generating-audio"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


# Progress percentage reported on entering each stage
STAGE_PROGRESS: dict[QueueStatus, int] = {
    QueueStatus.SCRAPING: 10,
    QueueStatus.SUMMARIZING: 40,
    QueueStatus.GENERATING_AUDIO: 70,
    QueueStatus.UPLOADING: 90,
    QueueStatus.COMPLETED: 100,
}


class ProcessorStatus:
    """Run states of the queue processor."""

    IDLE = "idle"
    PROCESSING = "processing"
    PAUSED = "paused"


class JobError(Exception):
    """Raised by a pipeline step to fail the current attempt."""

    pass


@dataclass
class StepOutput:
    """Text produced by a pipeline step and what it cost in USD."""

    text: str
    cost: float = 0.0


@dataclass
class QueueItem:
    item_id: str
    source_id: str
    position: int
    status: QueueStatus = QueueStatus.PENDING
    progress: int = 0
    retry_count: int = 0
    cost: float = 0.0
    error_message: str | None = None
    estimated_time_remaining: float | None = None
    summary: str | None = None
    audio: str | None = None


@dataclass
class ProgressUpdate:
    item_id: str
    step: QueueStatus
    progress: int
    estimated_time_remaining: float


@dataclass
class ProcessingResult:
    item_id: str
    success: bool
    final_status: QueueStatus
    cost: float
    processing_time: float
    error: str | None = None


@dataclass
class QueueProcessorConfig:
    max_concurrent_jobs: int = 3
    max_retries: int = 3
    retry_backoff_seconds: float = 5.0
    daily_cost_limit: float = 50.0


@dataclass
class QueueProcessorStats:
    status: str = ProcessorStatus.IDLE
    total_processed_today: int = 0
    successful_today: int = 0
    total_cost_today: float = 0.0
    total_processing_time: float = 0.0

    @property
    def success_rate(self) -> float:
        if not self.total_processed_today:
            return 0.0
        return self.successful_today / self.total_processed_today

    @property
    def average_processing_time(self) -> float:
        if not self.total_processed_today:
            return 0.0
        return self.total_processing_time / self.total_processed_today


def estimate_time_remaining(elapsed: float, progress: int) -> float:
    """Extrapolate the remaining seconds from elapsed time and progress."""
    if progress <= 0:
        return 0.0
    return max(0.0, elapsed / progress * 100 - elapsed)


def scraped_text(items: list[ScrapedContent]) -> str:
    """Join scraped articles into one document for summarization."""
    return "\n\n".join(f"{item.title}\n{item.content}" for item in items)


class QueueProcessor:
    """
    Processes pending queue items through the generation pipeline.

    Items are taken in position order, up to max_concurrent_jobs per call
    to process_pending(). A failing step is retried with a linear backoff;
    processing pauses once the daily cost limit is reached.
    """

    def __init__(
        self,
        scrapers: ScraperManager,
        summarize: Callable[[str], StepOutput],
        synthesize: Callable[[str], StepOutput],
        upload: Callable[[QueueItem], None] | None = None,
        config: QueueProcessorConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.scrapers = scrapers
        self.summarize = summarize
        self.synthesize = synthesize
        self.upload = upload
        self.config = config or QueueProcessorConfig()
        self._clock = clock
        self._sleep = sleep

        self.items: list[QueueItem] = []
        self.stats = QueueProcessorStats()
        self._listeners: list[Callable[[ProgressUpdate], None]] = []
        self._lock = threading.Lock()

    def enqueue(self, source_id: str) -> QueueItem:
        item = QueueItem(item_id=uuid.uuid4().hex, source_id=source_id, position=len(self.items))
        self.items.append(item)
        logger.debug(f"Queued {source_id} at position {item.position}")
        return item

    def pending(self) -> list[QueueItem]:
        return sorted(
            (item for item in self.items if item.status == QueueStatus.PENDING),
            key=lambda item: item.position,
        )

    def add_listener(self, listener: Callable[[ProgressUpdate], None]) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        if self.stats.status == ProcessorStatus.PROCESSING:
            logger.debug("Queue processor already running")
            return
        logger.info("Starting queue processor")
        self.stats.status = ProcessorStatus.PROCESSING

    def stop(self) -> None:
        logger.info("Stopping queue processor")
        self.stats.status = ProcessorStatus.IDLE

    def pause(self) -> None:
        self.stats.status = ProcessorStatus.PAUSED

    def resume(self) -> None:
        self.stats.status = ProcessorStatus.PROCESSING

    def reset_daily_stats(self) -> None:
        status = self.stats.status
        self.stats = QueueProcessorStats(status=status)

    def process_pending(self) -> list[ProcessingResult]:
        """Process the next batch of pending items and return their results."""
        if self.stats.status != ProcessorStatus.PROCESSING:
            return []

        if self.stats.total_cost_today >= self.config.daily_cost_limit:
            logger.warning(
                f"Daily cost limit reached (${self.stats.total_cost_today:.2f}), pausing processing"
            )
            self.pause()
            return []

        batch = self.pending()[: self.config.max_concurrent_jobs]
        if not batch:
            return []

        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            return list(pool.map(self.process_item, batch))

    def process_item(self, item: QueueItem) -> ProcessingResult:
        """Run one item through the pipeline, retrying failed attempts."""
        started = self._clock()

        while True:
            try:
                cost = self._run_pipeline(item)
            except Exception as e:
                item.retry_count += 1
                message = str(e) or type(e).__name__
                if item.retry_count < self.config.max_retries:
                    item.status = QueueStatus.PENDING
                    item.progress = 0
                    item.error_message = (
                        f"Retry {item.retry_count}/{self.config.max_retries}: {message}"
                    )
                    logger.warning(
                        f"Retrying {item.source_id} (attempt {item.retry_count + 1}): {message}"
                    )
                    self._sleep(self.config.retry_backoff_seconds * item.retry_count)
                    continue

                item.status = QueueStatus.FAILED
                item.progress = 0
                item.error_message = (
                    f"Failed after {self.config.max_retries} retries: {message}"
                )
                logger.error(f"Queue item {item.source_id} failed: {message}")
                return self._finish(item, started, success=False, error=message)

            item.cost = round(cost, 4)
            return self._finish(item, started, success=True)

    def _run_pipeline(self, item: QueueItem) -> float:
        attempt_started = self._clock()
        total_cost = 0.0

        self._advance(item, QueueStatus.SCRAPING, attempt_started)
        result = self.scrapers.scrape_source(item.source_id)
        if not result.success:
            raise JobError(result.error or "Scraping failed")
        if not result.content:
            raise JobError("No content scraped from source")

        self._advance(item, QueueStatus.SUMMARIZING, attempt_started)
        summary = self.summarize(scraped_text(result.content))
        total_cost += summary.cost
        item.summary = summary.text

        self._advance(item, QueueStatus.GENERATING_AUDIO, attempt_started)
        audio = self.synthesize(summary.text)
        total_cost += audio.cost
        item.audio = audio.text

        self._advance(item, QueueStatus.UPLOADING, attempt_started)
        if self.upload is not None:
            self.upload(item)

        self._advance(item, QueueStatus.COMPLETED, attempt_started)
        return total_cost

    def _advance(self, item: QueueItem, step: QueueStatus, attempt_started: float) -> None:
        progress = STAGE_PROGRESS[step]
        remaining = estimate_time_remaining(self._clock() - attempt_started, progress)
        item.status = step
        item.progress = progress
        item.estimated_time_remaining = remaining

        update = ProgressUpdate(
            item_id=item.item_id,
            step=step,
            progress=progress,
            estimated_time_remaining=remaining,
        )
        for listener in self._listeners:
            listener(update)

    def _finish(
        self,
        item: QueueItem,
        started: float,
        success: bool,
        error: str | None = None,
    ) -> ProcessingResult:
        elapsed = self._clock() - started
        with self._lock:
            self.stats.total_processed_today += 1
            self.stats.total_processing_time += elapsed
            if success:
                self.stats.successful_today += 1
                self.stats.total_cost_today += item.cost

        return ProcessingResult(
            item_id=item.item_id,
            success=success,
            final_status=item.status,
            cost=item.cost,
            processing_time=elapsed,
            error=error,
        )
