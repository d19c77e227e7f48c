"""
Defines Prometheus metrics for the extraction engine.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Importing the module twice (test collection, reloads) must not raise a
# duplicate registration error.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions": Counter(
            "clearpage_extractions_total",
            "Total number of extraction calls by outcome",
            ["outcome"],
        ),
        "locator_stage": Counter(
            "clearpage_locator_stage_total",
            "Main-content locator stage that produced the chosen node",
            ["stage"],
        ),
        "extraction_duration_seconds": Histogram(
            "clearpage_extraction_duration_seconds",
            "Time taken by one extract_article call",
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        ),
        "blocks_dropped": Counter(
            "clearpage_blocks_dropped_total",
            "Blocks removed by the text normalizer",
            ["reason"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
