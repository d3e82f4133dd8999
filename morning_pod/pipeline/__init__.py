"""Scraping and queue processing for podcast generation."""

from morning_pod.pipeline.queue import (
    QueueItem,
    QueueProcessor,
    QueueProcessorConfig,
    QueueStatus,
    StepOutput,
)
from morning_pod.pipeline.scraping import (
    BaseScraper,
    ScrapedContent,
    ScraperManager,
    ScraperManagerConfig,
    ScrapingResult,
)

__all__ = [
    "QueueItem",
    "QueueProcessor",
    "QueueProcessorConfig",
    "QueueStatus",
    "StepOutput",
    "BaseScraper",
    "ScrapedContent",
    "ScraperManager",
    "ScraperManagerConfig",
    "ScrapingResult",
]
