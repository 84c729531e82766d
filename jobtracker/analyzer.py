"""
Job-description analyzer.

Tries the primary provider, then the secondary, then the local heuristic.
A provider that reports a permission/credit failure is skipped for a
configurable window. Batches are always analyzed locally.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from jobtracker.availability import AvailabilityTracker
from jobtracker.config import Settings
from jobtracker.errors import is_permanent
from jobtracker.gateway import ProviderGateway
from jobtracker.heuristics import basic_analysis
from jobtracker.log import get_logger
from jobtracker.models import AnalysisResult
from jobtracker.providers.base import ChatProvider

log = get_logger(__name__)


class FallbackOrchestrator:
    def __init__(
        self,
        providers: Sequence[ChatProvider],
        *,
        gateway: ProviderGateway | None = None,
        availability: AvailabilityTracker | None = None,
        summary_max_chars: int = 220,
        batch_workers: int = 4,
    ) -> None:
        self.providers = list(providers)
        self.gateway = gateway or ProviderGateway()
        self.availability = availability or AvailabilityTracker()
        self.summary_max_chars = summary_max_chars
        self.batch_workers = batch_workers

    @classmethod
    def from_settings(cls, settings: Settings, providers: Sequence[ChatProvider]) -> FallbackOrchestrator:
        return cls(
            providers,
            gateway=ProviderGateway(
                retries=settings.model_retries,
                base_delay=settings.backoff_base_seconds,
            ),
            availability=AvailabilityTracker(disable_seconds=settings.disable_seconds),
            summary_max_chars=settings.summary_max_chars,
            batch_workers=settings.batch_workers,
        )

    def local(self, text: str) -> AnalysisResult:
        return basic_analysis(text, self.summary_max_chars)

    def analyze(self, text: str, *, local_only: bool = False) -> AnalysisResult:
        """Analyze one description; never raises."""
        try:
            return self._analyze(text, local_only)
        except Exception as exc:
            log.error("Unexpected analysis error (%s), using local analysis", exc)
            return self.local(str(text or ""))

    def _analyze(self, text: str, local_only: bool) -> AnalysisResult:
        text = str(text or "").strip()
        if not text or local_only:
            return self.local(text)

        for provider in self.providers:
            if not self.availability.is_available(provider.name):
                log.debug("Skipping %s (%s) — disabled", provider.name, provider.label)
                continue
            try:
                result = self.gateway.analyze(text, provider)
            except Exception as exc:
                if is_permanent(exc):
                    log.warning("%s (%s) permission/credits failure: %s", provider.name, provider.label, exc)
                    self.availability.disable(provider.name)
                else:
                    log.warning("%s (%s) failed: %s", provider.name, provider.label, exc)
                continue
            log.info("Analysis by %s (%s), fallback=%s", provider.name, provider.label, result.fallback)
            return result

        log.info("Using local analysis")
        return self.local(text)

    def analyze_many(self, texts: Sequence[str], *, local_only: bool | None = None) -> list[AnalysisResult]:
        """Analyze descriptions concurrently; results follow input order.

        More than one description forces local-only analysis unless
        *local_only* says otherwise.
        """
        if not texts:
            return []
        if local_only is None:
            local_only = len(texts) > 1
        if len(texts) == 1:
            return [self.analyze(texts[0], local_only=local_only)]

        workers = max(1, min(self.batch_workers, len(texts)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda t: self.analyze(t, local_only=local_only), texts))
