"""News source scrapers and the manager that aggregates their output."""

import base64
import logging
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = ("tldr", "hackernews", "morningbrew")


class ScrapingError(Exception):
    """Raised when a source cannot be scraped."""

    pass


def generate_content_hash(content: str) -> str:
    """Short fingerprint of content: the first 16 base64 characters."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")[:16]


@dataclass
class ScrapedContent:
    """A single article pulled from a news source."""

    content_id: str
    title: str
    summary: str
    content: str
    url: str
    published_at: datetime
    source: str
    category: str
    tags: list[str] = field(default_factory=list)
    content_hash: str = ""

    def __post_init__(self) -> None:
        if not self.content_hash:
            self.content_hash = generate_content_hash(self.content)

    @property
    def dedup_key(self) -> str:
        return f"{self.title.lower().strip()}-{self.content_hash}"


@dataclass
class ScrapingResult:
    success: bool
    source: str
    content: list[ScrapedContent] = field(default_factory=list)
    error: str | None = None
    scraped_at: datetime | None = None
    processing_time: float = 0.0

    @property
    def items_found(self) -> int:
        return len(self.content)


@dataclass
class ScrapingMetrics:
    """Request counters for one scraper. Response times are in seconds."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time: float = 0.0
    last_scrape_time: datetime | None = None
    items_scraped: int = 0

    def record(self, success: bool, response_time: float, item_count: int = 0) -> None:
        self.total_requests += 1
        if success:
            self.successful_requests += 1
            self.items_scraped += item_count
        else:
            self.failed_requests += 1

        total = self.successful_requests + self.failed_requests
        self.average_response_time = (
            self.average_response_time * (total - 1) + response_time
        ) / total
        self.last_scrape_time = datetime.now(timezone.utc)


class BaseScraper(ABC):
    """
    Abstract base class for news source scrapers.

    Subclasses only fetch and transform items; timing, metrics and
    error reporting are handled by scrape().
    """

    def __init__(self, name: str, category: str = "general") -> None:
        self.name = name
        self.category = category
        self.metrics = ScrapingMetrics()

    @abstractmethod
    def fetch(self) -> list[ScrapedContent]:
        """Fetch and transform the current items of the source."""
        ...

    def validate(self, item: ScrapedContent) -> bool:
        return bool(item.title.strip()) and bool(item.content.strip())

    def scrape(self) -> ScrapingResult:
        """Fetch the source, keeping only valid items."""
        started = time.monotonic()
        try:
            items = [item for item in self.fetch() if self.validate(item)]
        except Exception as e:
            elapsed = time.monotonic() - started
            self.metrics.record(False, elapsed)
            logger.warning(f"Scraping {self.name} failed: {e}")
            return ScrapingResult(
                success=False,
                source=self.name,
                error=str(e) or type(e).__name__,
                scraped_at=datetime.now(timezone.utc),
                processing_time=elapsed,
            )

        elapsed = time.monotonic() - started
        self.metrics.record(True, elapsed, len(items))
        logger.debug(f"Scraped {len(items)} items from {self.name} in {elapsed:.2f}s")
        return ScrapingResult(
            success=True,
            source=self.name,
            content=items,
            scraped_at=datetime.now(timezone.utc),
            processing_time=elapsed,
        )

    def get_metrics(self) -> ScrapingMetrics:
        return replace(self.metrics)


@dataclass
class ScraperManagerConfig:
    enabled_sources: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCES))
    max_concurrent_scrapers: int = 3
    deduplication_enabled: bool = True
    content_retention_days: int = 7


@dataclass
class AggregatedScrapingResult:
    success: bool
    total_items: int
    unique_items: int
    duplicates_removed: int
    content: list[ScrapedContent]
    source_results: dict[str, ScrapingResult]
    metrics: dict[str, ScrapingMetrics]
    aggregated_at: datetime


def deduplicate_content(content: list[ScrapedContent]) -> tuple[list[ScrapedContent], int]:
    """
    Drop items whose title and content hash were already seen.

    Returns:
        Tuple of (unique items in input order, number of duplicates removed)
    """
    seen: set[str] = set()
    unique: list[ScrapedContent] = []
    for item in content:
        if item.dedup_key in seen:
            continue
        seen.add(item.dedup_key)
        unique.append(item)
    return unique, len(content) - len(unique)


def chunked(items: list, size: int) -> list[list]:
    size = max(1, size)
    return [items[i:i + size] for i in range(0, len(items), size)]


class ScraperManager:
    """
    Runs the enabled scrapers and keeps recently scraped content.

    Scrapers are registered by source name; only those named in
    config.enabled_sources are used.
    """

    def __init__(
        self,
        available: dict[str, BaseScraper],
        config: ScraperManagerConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._available = dict(available)
        self.config = config or ScraperManagerConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._content_cache: dict[str, ScrapedContent] = {}
        self.scrapers: dict[str, BaseScraper] = {}
        self._initialize_scrapers()

    def _initialize_scrapers(self) -> None:
        self.scrapers = {}
        for source in self.config.enabled_sources:
            scraper = self._available.get(source)
            if scraper is None:
                logger.warning(f"No scraper available for source {source}")
                continue
            self.scrapers[source] = scraper

    def scrape_all(self) -> AggregatedScrapingResult:
        """Scrape every enabled source, a chunk of scrapers at a time."""
        source_results: dict[str, ScrapingResult] = {}
        metrics: dict[str, ScrapingMetrics] = {}
        all_content: list[ScrapedContent] = []

        for chunk in chunked(list(self.scrapers.items()), self.config.max_concurrent_scrapers):
            with ThreadPoolExecutor(max_workers=len(chunk)) as pool:
                results = list(pool.map(lambda entry: entry[1].scrape(), chunk))

            for (source, scraper), result in zip(chunk, results):
                source_results[source] = result
                metrics[source] = scraper.get_metrics()
                if result.success:
                    all_content.extend(result.content)

        if self.config.deduplication_enabled:
            unique, duplicates = deduplicate_content(all_content)
        else:
            unique, duplicates = all_content, 0

        self._update_content_cache(unique)
        logger.info(
            f"Scraped {len(all_content)} items from {len(source_results)} sources "
            f"({duplicates} duplicates removed)"
        )

        return AggregatedScrapingResult(
            success=True,
            total_items=len(all_content),
            unique_items=len(unique),
            duplicates_removed=duplicates,
            content=unique,
            source_results=source_results,
            metrics=metrics,
            aggregated_at=self._clock(),
        )

    def scrape_source(self, source: str) -> ScrapingResult:
        scraper = self.scrapers.get(source)
        if scraper is None:
            raise ScrapingError(f"Scraper not found for source: {source}")
        return scraper.scrape()

    def _update_content_cache(self, content: list[ScrapedContent]) -> None:
        cutoff = self._clock() - timedelta(days=self.config.content_retention_days)
        for key in [k for k, item in self._content_cache.items() if item.published_at < cutoff]:
            del self._content_cache[key]

        for item in content:
            self._content_cache[item.content_id] = item

    def get_cached_content(self) -> list[ScrapedContent]:
        return list(self._content_cache.values())

    def get_content_by_source(self, source: str) -> list[ScrapedContent]:
        needle = source.lower()
        return [item for item in self._content_cache.values() if needle in item.source.lower()]

    def get_aggregated_metrics(self) -> dict[str, ScrapingMetrics]:
        return {source: scraper.get_metrics() for source, scraper in self.scrapers.items()}

    def update_config(self, **changes) -> None:
        """Update configuration fields, re-selecting scrapers if sources changed."""
        self.config = replace(self.config, **changes)
        if "enabled_sources" in changes:
            self._initialize_scrapers()

    def available_scrapers(self) -> list[str]:
        return list(self.scrapers)

    def is_source_enabled(self, source: str) -> bool:
        return source in self.scrapers
