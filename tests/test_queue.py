"""Tests for the queue processor."""

from datetime import datetime, timezone

import pytest

from morning_pod.pipeline.queue import (
    ProcessorStatus,
    QueueProcessor,
    QueueProcessorConfig,
    QueueStatus,
    StepOutput,
    estimate_time_remaining,
)
from morning_pod.pipeline.scraping import BaseScraper, ScrapedContent, ScraperManager, ScraperManagerConfig


class FakeScraper(BaseScraper):
    def __init__(self, name, titles):
        super().__init__(name)
        self.titles = titles

    def fetch(self):
        return [
            ScrapedContent(
                content_id=title,
                title=title,
                summary="",
                content=f"{title} body",
                url="https://example.com",
                published_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                source=self.name,
                category="technology",
            )
            for title in self.titles
        ]


class TickClock:
    """Monotonic clock that advances one second per reading."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


def make_processor(summarize=None, synthesize=None, titles=("Story",), **config):
    scrapers = ScraperManager(
        {"tldr": FakeScraper("TLDR", list(titles))},
        ScraperManagerConfig(enabled_sources=["tldr"]),
    )
    processor = QueueProcessor(
        scrapers,
        summarize=summarize or (lambda text: StepOutput(f"summary of {len(text)} chars", 0.02)),
        synthesize=synthesize or (lambda text: StepOutput("episode.mp3", 0.01)),
        config=QueueProcessorConfig(**config),
        sleep=lambda seconds: None,
    )
    processor.start()
    return processor


class TestEstimateTimeRemaining:
    """Tests for estimate_time_remaining."""

    def test_extrapolates(self):
        assert estimate_time_remaining(10.0, 40) == pytest.approx(15.0)

    def test_no_progress(self):
        assert estimate_time_remaining(10.0, 0) == 0.0

    def test_complete(self):
        assert estimate_time_remaining(10.0, 100) == 0.0


class TestProcessItem:
    """Tests for single item processing."""

    def test_completes_through_all_stages(self):
        processor = make_processor()
        steps = []
        processor.add_listener(lambda update: steps.append((update.step, update.progress)))
        item = processor.enqueue("tldr")

        result = processor.process_item(item)

        assert result.success
        assert result.final_status == QueueStatus.COMPLETED
        assert steps == [
            (QueueStatus.SCRAPING, 10),
            (QueueStatus.SUMMARIZING, 40),
            (QueueStatus.GENERATING_AUDIO, 70),
            (QueueStatus.UPLOADING, 90),
            (QueueStatus.COMPLETED, 100),
        ]
        assert item.status == QueueStatus.COMPLETED
        assert item.progress == 100
        assert item.cost == pytest.approx(0.03)
        assert item.audio == "episode.mp3"

    def test_estimates_remaining_time(self):
        processor = make_processor()
        processor._clock = TickClock()
        updates = []
        processor.add_listener(updates.append)
        processor.process_item(processor.enqueue("tldr"))

        # Scraping is reported one second into the attempt at 10%
        assert updates[0].estimated_time_remaining == pytest.approx(9.0)
        assert updates[-1].estimated_time_remaining == 0.0

    def test_summarizer_receives_scraped_text(self):
        seen = []

        def summarize(text):
            seen.append(text)
            return StepOutput("s")

        processor = make_processor(summarize=summarize, titles=("One", "Two"))
        processor.process_item(processor.enqueue("tldr"))
        assert seen == ["One\nOne body\n\nTwo\nTwo body"]

    def test_empty_scrape_fails_after_retries(self):
        processor = make_processor(titles=(), max_retries=2)
        item = processor.enqueue("tldr")

        result = processor.process_item(item)

        assert not result.success
        assert result.error == "No content scraped from source"
        assert item.status == QueueStatus.FAILED
        assert item.progress == 0
        assert item.retry_count == 2
        assert item.error_message == "Failed after 2 retries: No content scraped from source"

    def test_unknown_source_fails(self):
        processor = make_processor(max_retries=1)
        result = processor.process_item(processor.enqueue("reddit"))
        assert result.final_status == QueueStatus.FAILED
        assert "reddit" in result.error

    def test_retry_then_success(self):
        attempts = []

        def flaky(text):
            attempts.append(text)
            if len(attempts) == 1:
                raise TimeoutError("provider timeout")
            return StepOutput("audio.mp3", 0.01)

        sleeps = []
        processor = make_processor(synthesize=flaky, retry_backoff_seconds=5.0)
        processor._sleep = sleeps.append
        item = processor.enqueue("tldr")

        result = processor.process_item(item)

        assert result.success
        assert item.retry_count == 1
        assert sleeps == [5.0]
        assert item.error_message == "Retry 1/3: provider timeout"


class TestProcessPending:
    """Tests for batch processing and processor state."""

    def test_processes_in_position_order_up_to_limit(self):
        processor = make_processor(max_concurrent_jobs=2)
        items = [processor.enqueue("tldr") for _ in range(3)]

        results = processor.process_pending()

        assert [r.item_id for r in results] == [items[0].item_id, items[1].item_id]
        assert items[2].status == QueueStatus.PENDING
        assert processor.pending() == [items[2]]

    def test_not_started(self):
        processor = make_processor()
        processor.stop()
        processor.enqueue("tldr")
        assert processor.process_pending() == []

    def test_paused(self):
        processor = make_processor()
        processor.pause()
        processor.enqueue("tldr")
        assert processor.process_pending() == []
        processor.resume()
        assert len(processor.process_pending()) == 1

    def test_daily_cost_limit_pauses(self):
        processor = make_processor(daily_cost_limit=0.03)
        processor.enqueue("tldr")
        processor.enqueue("tldr")
        processor.enqueue("tldr")

        assert len(processor.process_pending()) == 3
        assert processor.stats.total_cost_today == pytest.approx(0.09)

        processor.enqueue("tldr")
        assert processor.process_pending() == []
        assert processor.stats.status == ProcessorStatus.PAUSED

    def test_stats(self):
        processor = make_processor(max_retries=1)
        processor.enqueue("tldr")
        processor.enqueue("reddit")
        processor.process_pending()

        assert processor.stats.total_processed_today == 2
        assert processor.stats.success_rate == pytest.approx(0.5)
        assert processor.stats.average_processing_time >= 0

        processor.reset_daily_stats()
        assert processor.stats.total_processed_today == 0
        assert processor.stats.status == ProcessorStatus.PROCESSING
