"""Cost optimizer for summarization requests.

Picks the cheapest summarization model that suits the content, serves
repeated content from an in-memory summary cache, and refuses work that
would exceed the configured budget.
"""

import hashlib
import logging
import math
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Default time-to-live for cached summaries
DEFAULT_CACHE_TTL_HOURS = 48

# Rough approximation: 4 characters per token
CHARS_PER_TOKEN = 4

# USD per 1K tokens used by the optimizer's own estimates
OPTIMIZER_PRICING: dict[str, float] = {
    "gpt-3.5-turbo": 0.0005,
    "gpt-4o-mini": 0.00015,
    "gpt-4o": 0.0025,
}
DEFAULT_PRICE_PER_1K = 0.001

# Fallback model when the budget is exhausted
BUDGET_FALLBACK_MODEL = "gpt-3.5-turbo"

# Short text priced when checking whether the budget allows another request
BUDGET_REFERENCE_TEXT = "average content"

TECHNICAL_TERMS = [
    "algorithm",
    "ai",
    "machine learning",
    "blockchain",
    "cryptocurrency",
    "quantum",
    "neural network",
    "api",
    "database",
    "server",
    "protocol",
    "framework",
    "architecture",
    "infrastructure",
    "scalability",
    "optimization",
]

REASONING_PATTERN = re.compile(
    r"\b(?:why|how|what if|because|therefore|however|meanwhile)\b",
    re.IGNORECASE,
)


class QualityTrade:
    """How much quality is given up for cost."""

    NONE = "none"
    MINOR = "minor"
    MODERATE = "moderate"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class ComplexityFactors:
    technical_terms: int
    sentence_complexity: int
    topic_depth: int
    required_reasoning: int

    @property
    def weighted_total(self) -> float:
        return (
            self.technical_terms * 0.3
            + self.sentence_complexity * 0.2
            + self.topic_depth * 0.2
            + self.required_reasoning * 0.3
        )


@dataclass
class ComplexityAnalysis:
    """Result of content complexity analysis (0-10 scale)."""

    score: int
    factors: ComplexityFactors
    recommended_model: str
    confidence: float


@dataclass
class CostBudget:
    """Spending limits in USD."""

    daily: float = 5.0
    monthly: float = 50.0
    per_request: float = 1.0


@dataclass
class SummaryCacheEntry:
    """A cached summary and the metadata of the call that produced it."""

    entry_id: str
    content_hash: str
    summary: str
    model: str
    cost: float
    quality: float
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass
class OptimizationResult:
    should_process: bool
    recommended_model: str
    estimated_cost: float
    reason: str
    quality_trade: str = QualityTrade.NONE
    cache_hit: SummaryCacheEntry | None = None


@dataclass
class BudgetCheck:
    can_afford: bool
    remaining_daily: float
    remaining_monthly: float


def analyze_complexity(content: str) -> ComplexityAnalysis:
    """Score how demanding content is to summarize."""
    words = re.split(r"\s+", content.lower())
    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]

    technical_hits = sum(1 for word in words if any(term in word for term in TECHNICAL_TERMS))
    technical_score = technical_hits / len(words) * 10

    if sentences:
        avg_words_per_sentence = len(words) / len(sentences)
        sentence_score = min(max((avg_words_per_sentence - 10) / 5, 0), 10)
    else:
        sentence_score = 0.0

    depth_score = min(len(content) / 2000 * 5, 10)

    reasoning_matches = len(REASONING_PATTERN.findall(content))
    reasoning_score = min(reasoning_matches / 10 * 10, 10)

    factors = ComplexityFactors(
        technical_terms=_round_half_up(technical_score),
        sentence_complexity=_round_half_up(sentence_score),
        topic_depth=_round_half_up(depth_score),
        required_reasoning=_round_half_up(reasoning_score),
    )
    total = factors.weighted_total

    if total <= 4:
        model = "gpt-3.5-turbo"
    elif total <= 7:
        model = "gpt-4o-mini"
    else:
        model = "gpt-4o"

    return ComplexityAnalysis(
        score=_round_half_up(total),
        factors=factors,
        recommended_model=model,
        confidence=min(1.0, total / 10),
    )


def estimate_content_cost(content: str, model: str) -> float:
    """Estimate the USD cost of summarizing content with a model."""
    token_count = len(content) / CHARS_PER_TOKEN
    return token_count / 1000 * OPTIMIZER_PRICING.get(model, DEFAULT_PRICE_PER_1K)


def content_hash(content: str) -> str:
    """Cache key for content, insensitive to case and surrounding whitespace."""
    return hashlib.sha256(content.strip().lower().encode()).hexdigest()[:16]


class CostOptimizer:
    """
    Chooses summarization models under a spending budget.

    Tracks daily and monthly spend from cached summaries and keeps
    summaries in memory keyed by content hash.
    """

    def __init__(
        self,
        budget: CostBudget | None = None,
        cache_ttl_hours: float = DEFAULT_CACHE_TTL_HOURS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.budget = budget or CostBudget()
        self.cache_ttl = timedelta(hours=cache_ttl_hours)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._cache: dict[str, SummaryCacheEntry] = {}
        self.daily_cost = 0.0
        self.monthly_cost = 0.0
        self._lookups = 0
        self._hits = 0

    def optimize(
        self,
        content: str,
        force_process: bool = False,
        required_quality: str | None = None,
    ) -> OptimizationResult:
        """
        Decide whether and how to summarize content.

        Args:
            content: Article text to summarize
            force_process: Process even when the budget is exhausted
            required_quality: "basic", "standard" or "premium" (optional)

        Returns:
            OptimizationResult describing the decision
        """
        cached = self.get_cached(content)
        if cached is not None:
            return OptimizationResult(
                should_process=False,
                recommended_model=cached.model,
                estimated_cost=0.0,
                reason="Content found in cache",
                cache_hit=cached,
            )

        complexity = analyze_complexity(content)

        budget = self.check_budget(complexity.recommended_model)
        if not budget.can_afford and not force_process:
            logger.warning(
                f"Budget exhausted (daily ${self.daily_cost:.2f}/${self.budget.daily:.2f}, "
                f"monthly ${self.monthly_cost:.2f}/${self.budget.monthly:.2f})"
            )
            return OptimizationResult(
                should_process=False,
                recommended_model=BUDGET_FALLBACK_MODEL,
                estimated_cost=0.0,
                reason="Budget constraints - daily/monthly limit reached",
                quality_trade=QualityTrade.MODERATE,
            )

        model = complexity.recommended_model
        quality_trade = QualityTrade.NONE

        if required_quality == "basic" and complexity.score <= 6:
            model = "gpt-3.5-turbo"
            quality_trade = QualityTrade.MINOR
        elif required_quality == "standard" and complexity.score <= 8:
            model = "gpt-4o-mini"

        estimated = estimate_content_cost(content, model)
        logger.debug(f"Complexity {complexity.score}/10 -> {model} (~${estimated:.5f})")

        return OptimizationResult(
            should_process=True,
            recommended_model=model,
            estimated_cost=estimated,
            reason=f"Content complexity: {complexity.score}/10, Model: {model}",
            quality_trade=quality_trade,
        )

    def get_cached(self, content: str) -> SummaryCacheEntry | None:
        """Get a cached, unexpired summary for content."""
        self._lookups += 1
        key = content_hash(content)
        entry = self._cache.get(key)

        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            logger.debug(f"Cache entry {key} expired")
            del self._cache[key]
            return None

        self._hits += 1
        return entry

    def cache_summary(
        self,
        content: str,
        summary: str,
        model: str,
        cost: float,
        quality: float,
    ) -> SummaryCacheEntry:
        """Cache a summary and record its cost against the budget."""
        now = self._clock()
        self._prune_expired(now)
        entry = SummaryCacheEntry(
            entry_id=uuid.uuid4().hex,
            content_hash=content_hash(content),
            summary=summary,
            model=model,
            cost=cost,
            quality=quality,
            created_at=now,
            expires_at=now + self.cache_ttl,
        )
        self._cache[entry.content_hash] = entry

        self.daily_cost += cost
        self.monthly_cost += cost
        logger.debug(f"Cached summary {entry.content_hash} ({model}, ${cost:.5f})")
        return entry

    def _prune_expired(self, now: datetime) -> int:
        expired = [key for key, entry in self._cache.items() if entry.is_expired(now)]
        for key in expired:
            del self._cache[key]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired cache entries")
        return len(expired)

    def check_budget(self, model: str) -> BudgetCheck:
        """Check whether another request with a model fits the budget."""
        estimated = estimate_content_cost(BUDGET_REFERENCE_TEXT, model)
        return BudgetCheck(
            can_afford=(
                self.daily_cost + estimated <= self.budget.daily
                and self.monthly_cost + estimated <= self.budget.monthly
                and estimated <= self.budget.per_request
            ),
            remaining_daily=self.budget.daily - self.daily_cost,
            remaining_monthly=self.budget.monthly - self.monthly_cost,
        )

    def cost_summary(self) -> dict[str, Any]:
        """Current spend, budget and cache statistics."""
        return {
            "daily": self.daily_cost,
            "monthly": self.monthly_cost,
            "budget": {
                "daily": self.budget.daily,
                "monthly": self.budget.monthly,
                "per_request": self.budget.per_request,
            },
            "cache_entries": len(self._cache),
            "cache_hit_rate": self._hits / self._lookups if self._lookups else 0.0,
        }

    def reset_daily_costs(self) -> None:
        self.daily_cost = 0.0

    def reset_monthly_costs(self) -> None:
        self.monthly_cost = 0.0
