"""
HueMatch Metrics
Process-local counters and latency samples for the palette endpoints.
"""
import time
from collections import Counter, defaultdict, deque
from threading import Lock
from typing import Any, Deque, Dict, Optional

import numpy as np

# Latency percentiles cover the most recent samples only
LATENCY_WINDOW = 1000


class PaletteMetrics:
    """Counts analyses, suggestions, saves and failures for one process."""

    def __init__(self, latency_window: int = LATENCY_WINDOW):
        self._lock = Lock()
        self._started = time.time()
        self._counts: Counter = Counter()
        self._latency_ms: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=latency_window))

    def record_analysis(self, duration_ms: float, fallback_used: bool):
        with self._lock:
            self._counts["analyze_total"] += 1
            if fallback_used:
                self._counts["analyze_fallback_total"] += 1
            self._latency_ms["analyze"].append(duration_ms)

    def record_suggestion(self):
        with self._lock:
            self._counts["suggest_total"] += 1

    def record_palette_saved(self):
        with self._lock:
            self._counts["palettes_saved_total"] += 1

    def record_failure(self, operation: str, reason: str):
        """Count a failed request, keyed as ``<operation>_failed_<reason>``."""
        with self._lock:
            self._counts[f"{operation}_failed_{reason}"] += 1

    def fallback_rate(self) -> float:
        """Share of analyses that found no usable pixel and fell back to gray."""
        with self._lock:
            total = self._counts["analyze_total"]
            return self._counts["analyze_fallback_total"] / total if total else 0.0

    def latency_summary(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            samples = {name: list(values) for name, values in self._latency_ms.items() if values}

        summary = {}
        for name, values in samples.items():
            data = np.asarray(values, dtype=np.float64)
            summary[name] = {
                "count": int(data.size),
                "mean": float(data.mean()),
                "p50": float(np.percentile(data, 50)),
                "p95": float(np.percentile(data, 95)),
                "max": float(data.max()),
            }
        return summary

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            counters = dict(self._counts)
        return {
            "uptime_seconds": round(time.time() - self._started, 3),
            "counters": counters,
            "fallback_rate": self.fallback_rate(),
            "latency_ms": self.latency_summary(),
        }

    def reset(self):
        with self._lock:
            self._counts.clear()
            self._latency_ms.clear()
            self._started = time.time()


_metrics: Optional[PaletteMetrics] = None


def get_metrics() -> PaletteMetrics:
    """Get or create the process-wide metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = PaletteMetrics()
    return _metrics


def reset_metrics():
    global _metrics
    if _metrics is not None:
        _metrics.reset()
