"""Metrics service for tracking API performance.

Singleton service tracking scoring calls, their latency, and hit rate of the
recommendation cache.
"""

import threading
from typing import Dict


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking for scoring calls.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._reset_counters()
        self._initialized = True

    def _reset_counters(self) -> None:
        self._inference_count = 0
        self._total_latency_ms = 0.0
        self._min_latency_ms = float("inf")
        self._max_latency_ms = 0.0
        self._cache_hits = 0
        self._cache_misses = 0

    def record_inference(self, latency_ms: float) -> None:
        """Record a scoring call with its latency in milliseconds."""
        with self._lock:
            self._inference_count += 1
            self._total_latency_ms += latency_ms
            self._min_latency_ms = min(self._min_latency_ms, latency_ms)
            self._max_latency_ms = max(self._max_latency_ms, latency_ms)

    def record_cache(self, hit: bool) -> None:
        """Record a recommendation-cache lookup."""
        with self._lock:
            if hit:
                self._cache_hits += 1
            else:
                self._cache_misses += 1

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary with inference_count, average/min/max latency in
            milliseconds, cache_hits and cache_misses.
        """
        with self._lock:
            avg_latency = (
                self._total_latency_ms / self._inference_count
                if self._inference_count > 0
                else 0.0
            )
            min_latency = 0.0 if self._min_latency_ms == float("inf") else self._min_latency_ms

            return {
                "inference_count": self._inference_count,
                "average_latency_ms": round(avg_latency, 2),
                "min_latency_ms": round(min_latency, 2),
                "max_latency_ms": round(self._max_latency_ms, 2),
                "cache_hits": self._cache_hits,
                "cache_misses": self._cache_misses,
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._reset_counters()


# Global singleton instance
metrics_service = MetricsService()
