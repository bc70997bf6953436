"""Multi-source collection with retries and synthetic fallback."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, as_completed
from dataclasses import replace
from typing import Dict, List, Mapping, Optional

import requests
from tenacity import Retrying, retry_if_result, stop_after_attempt, wait_exponential

from ..core.config import Settings
from ..core.constants import OrchestrationConstants, SourceConstants
from ..core.models import FeedbackQuery, OrchestrationResult, SourceQuery, SourceResult, SourceStatus
from ..core.scoring import percentage
from .adapters import SourceAdapter
from .brightdata_client import (
    AppStoreAdapter,
    BrightDataClient,
    GlassdoorAdapter,
    GooglePlayAdapter,
    GoogleReviewsAdapter,
    TrustpilotAdapter,
)
from .reddit_client import RedditAdapter
from .storage import RawPayloadStore
from .synthetic import SyntheticGenerator

logger = logging.getLogger(__name__)

BRIGHT_DATA_ADAPTERS = {
    SourceConstants.GOOGLE_PLAY: GooglePlayAdapter,
    SourceConstants.APP_STORE: AppStoreAdapter,
    SourceConstants.GOOGLE_REVIEWS: GoogleReviewsAdapter,
    SourceConstants.TRUSTPILOT: TrustpilotAdapter,
    SourceConstants.GLASSDOOR: GlassdoorAdapter,
}


class FallbackOrchestrator:
    """
    Runs every configured source concurrently and guarantees one result per source.

    Each source gets up to ``max_retries`` real attempts, each bounded by
    ``attempt_timeout``. A source that still fails, or comes back empty while
    ``fallback_on_empty`` is set, is replaced with synthetic data. Sources that
    have not resolved by ``run_deadline`` are cancelled and fall back too.
    Results are gathered in the calling thread and returned in configured order.
    """

    def __init__(
        self,
        adapters: Mapping[str, SourceAdapter],
        generator: SyntheticGenerator,
        *,
        max_retries: int = OrchestrationConstants.MAX_RETRY_ATTEMPTS,
        retry_delay: float = OrchestrationConstants.RETRY_BASE_DELAY,
        retry_backoff: float = OrchestrationConstants.RETRY_BACKOFF,
        attempt_timeout: float = OrchestrationConstants.ATTEMPT_TIMEOUT,
        run_deadline: float = OrchestrationConstants.RUN_DEADLINE,
        max_workers: int = OrchestrationConstants.MAX_WORKERS,
        fallback_on_empty: bool = True,
        raw_store: Optional[RawPayloadStore] = None,
    ):
        self.adapters = dict(adapters)
        self.generator = generator
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.retry_backoff = retry_backoff
        self.attempt_timeout = attempt_timeout
        self.run_deadline = run_deadline
        self.max_workers = max(1, max_workers)
        self.fallback_on_empty = fallback_on_empty
        self.raw_store = raw_store

    @classmethod
    def from_settings(
        cls,
        adapters: Mapping[str, SourceAdapter],
        settings: Settings,
        generator: Optional[SyntheticGenerator] = None,
        raw_store: Optional[RawPayloadStore] = None,
    ) -> "FallbackOrchestrator":
        generator = generator or SyntheticGenerator(
            seed=settings.synthetic_seed,
            items_per_source=settings.synthetic_items_per_source,
        )
        return cls(
            adapters,
            generator,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
            retry_backoff=settings.retry_backoff,
            attempt_timeout=settings.attempt_timeout,
            run_deadline=settings.run_deadline,
            max_workers=settings.max_workers,
            fallback_on_empty=settings.fallback_on_empty,
            raw_store=raw_store,
        )

    def collect(self, query: FeedbackQuery) -> OrchestrationResult:
        """Collect feedback for every source in ``query``."""
        query.validate()
        started = time.monotonic()
        sources = list(query.sources)
        source_queries = {source: query.for_source(source) for source in sources}
        workers = min(self.max_workers, len(sources))
        logger.info(f"🚀 Collecting feedback from {len(sources)} sources ({workers} workers)")

        resolved: Dict[str, SourceResult] = {}
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="feedback-source")
        # Timed-out attempts keep their thread until the vendor call returns
        attempt_pool = ThreadPoolExecutor(
            max_workers=workers * self.max_retries, thread_name_prefix="feedback-attempt"
        )
        try:
            futures = {
                executor.submit(self._collect_real, source_queries[source], attempt_pool): source
                for source in sources
            }
            try:
                for future in as_completed(futures, timeout=self.run_deadline):
                    source = futures[future]
                    try:
                        resolved[source] = future.result()
                    except Exception as e:
                        logger.exception(f"❌ {source}: collection task crashed")
                        resolved[source] = SourceResult.failed(source, f"{type(e).__name__}: {e}")
            except FuturesTimeoutError:
                pending = [source for source in sources if source not in resolved]
                logger.warning(f"⏰ Run deadline of {self.run_deadline}s reached, unresolved: {', '.join(pending)}")
                for future, source in futures.items():
                    if source not in resolved:
                        future.cancel()
                        resolved[source] = SourceResult.failed(
                            source, f"run deadline of {self.run_deadline}s exceeded"
                        )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
            attempt_pool.shutdown(wait=False, cancel_futures=True)

        results = [self._finalize(source_queries[source], resolved[source]) for source in sources]
        orchestration = self._summarize(results, time.monotonic() - started)
        self._save_summary(orchestration)
        return orchestration

    def _collect_real(self, source_query: SourceQuery, attempt_pool: ThreadPoolExecutor) -> SourceResult:
        """Run the retry loop for one source. Returns the last real outcome."""
        adapter = self.adapters.get(source_query.source)
        if adapter is None:
            logger.warning(f"No adapter registered for {source_query.source}")
            return SourceResult.failed(source_query.source, "no adapter registered for source")

        attempts = 0

        def attempt() -> SourceResult:
            nonlocal attempts
            attempts += 1
            return self._attempt(adapter, source_query, attempt_pool)

        retryer = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_delay, max=self.retry_backoff * 10),
            retry=retry_if_result(lambda result: result.status is SourceStatus.FAILED),
            before_sleep=lambda state: logger.info(
                f"🔄 Retrying {source_query.source} (attempt {state.attempt_number} failed)"
            ),
            retry_error_callback=lambda state: state.outcome.result(),
        )
        result = retryer(attempt)
        return replace(result, attempts=attempts)

    def _attempt(self, adapter: SourceAdapter, source_query: SourceQuery,
                 attempt_pool: ThreadPoolExecutor) -> SourceResult:
        """One real fetch bounded by the per-attempt timeout."""
        future = attempt_pool.submit(self._guarded_fetch, adapter, source_query)
        try:
            return future.result(timeout=self.attempt_timeout)
        except FuturesTimeoutError:
            future.cancel()
            logger.warning(f"⏰ {source_query.source}: attempt timed out after {self.attempt_timeout}s")
            return SourceResult.failed(
                source_query.source, f"FetchError: attempt timed out after {self.attempt_timeout}s"
            )

    @staticmethod
    def _guarded_fetch(adapter: SourceAdapter, source_query: SourceQuery) -> SourceResult:
        try:
            result = adapter.fetch(source_query)
        except Exception as e:
            logger.exception(f"❌ {source_query.source}: adapter raised despite its contract")
            return SourceResult.failed(source_query.source, f"{type(e).__name__}: {e}")
        if not isinstance(result, SourceResult) or result.source != source_query.source:
            return SourceResult.failed(source_query.source, "adapter returned an invalid result")
        return result

    def _finalize(self, source_query: SourceQuery, result: SourceResult) -> SourceResult:
        """Substitute synthetic data where the real result is unusable."""
        needs_fallback = result.status is SourceStatus.FAILED or (
            result.status is SourceStatus.EMPTY and self.fallback_on_empty
        )
        if not needs_fallback:
            if result.status is SourceStatus.OK:
                logger.info(f"✅ {result.source}: {result.count} real items")
            else:
                logger.info(f"{result.source}: no real items, empty fallback disabled")
            return result

        synthetic = self.generator.generate(source_query)
        logger.info(
            f"📦 {result.source}: using {synthetic.count} synthetic items "
            f"({result.status.value}: {result.error or 'no detail'})"
        )
        return replace(
            synthetic,
            fallback_reason=result.status,
            error=result.error,
            attempts=result.attempts,
        )

    @staticmethod
    def _summarize(results: List[SourceResult], elapsed: float) -> OrchestrationResult:
        real_sources = [r.source for r in results if r.has_real_data]
        mock_sources = [r.source for r in results if not r.has_real_data]
        total_items = sum(r.count for r in results)
        real_items = sum(r.count for r in results if r.has_real_data)

        orchestration = OrchestrationResult(
            results=results,
            real_data_sources=real_sources,
            mock_data_sources=mock_sources,
            real_data_percentage=percentage(len(real_sources), len(results)),
            real_reviews_percentage=percentage(real_items, total_items),
            total_items=total_items,
            real_items=real_items,
            elapsed_seconds=elapsed,
        )
        logger.info(f"✅ Real data sources: {', '.join(real_sources) or 'none'}")
        logger.info(f"📦 Mock data sources: {', '.join(mock_sources) or 'none'}")
        logger.info(
            f"📊 Real data: {orchestration.real_data_percentage}% of sources, "
            f"{orchestration.real_reviews_percentage}% of items ({total_items} total)"
        )
        return orchestration

    def _save_summary(self, orchestration: OrchestrationResult) -> None:
        if self.raw_store is None:
            return
        try:
            self.raw_store.save("hybrid_scraping_results", orchestration.to_dict())
        except Exception as e:
            logger.warning(f"Failed to save collection summary: {e}")


def build_adapters(
    query: FeedbackQuery,
    settings: Settings,
    session: Optional[requests.Session] = None,
    reddit=None,
    raw_store: Optional[RawPayloadStore] = None,
) -> Dict[str, SourceAdapter]:
    """Build adapters for the sources named in ``query``.

    Bright Data sources share one client (and so one HTTP session). Sources
    without an adapter are left out; the orchestrator falls back for them.
    """
    client = None
    adapters: Dict[str, SourceAdapter] = {}
    for source in query.sources:
        if source in BRIGHT_DATA_ADAPTERS:
            if client is None:
                client = BrightDataClient(
                    api_key=settings.bright_data_api_key,
                    customer_id=settings.bright_data_customer_id,
                    base_url=settings.bright_data_base_url,
                    session=session,
                    timeout=settings.request_timeout,
                )
            adapters[source] = BRIGHT_DATA_ADAPTERS[source](client, raw_store=raw_store)
        elif source == SourceConstants.REDDIT:
            adapters[source] = RedditAdapter(
                reddit=reddit,
                client_id=settings.reddit_client_id,
                client_secret=settings.reddit_client_secret,
                user_agent=settings.reddit_user_agent,
                raw_store=raw_store,
            )
        else:
            logger.warning(f"No collector available for source '{source}'")
    return adapters
