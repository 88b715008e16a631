"""Prometheus metrics for the latent chord substitution service.

Exposes musical context in metrics so dashboards show which strategies
players reach for and how often selections are declined, not just generic
HTTP stats.

Metrics:
    latent_substitutions_total            Counter by strategy and outcome
                                          (substituted/unchanged/declined reason)
    latent_substitution_latency_seconds   Histogram of substitution latency
    latent_dictionary_reloads_total       Times the chord dictionary was replaced
    latent_dictionary_size                Chords in the active dictionary

Usage::

    from infrastructure.metrics import LatencyTimer, record_substitution

    with LatencyTimer() as t:
        result = session.substitute_phrase(ids, [2], "knn", {"k": 5})
    record_substitution(strategy="knn", outcome="substituted", latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

substitutions_total = Counter(
    "latent_substitutions_total",
    "Substitution requests by strategy and outcome",
    ["strategy", "outcome"],
    registry=_REGISTRY,
)

substitution_latency_seconds = Histogram(
    "latent_substitution_latency_seconds",
    "Substitution latency in seconds",
    ["strategy"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=_REGISTRY,
)

dictionary_reloads_total = Counter(
    "latent_dictionary_reloads_total",
    "Number of times the chord dictionary was replaced",
    registry=_REGISTRY,
)

dictionary_size = Gauge(
    "latent_dictionary_size",
    "Number of chords in the active dictionary",
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_substitution(
    *,
    strategy: str,
    outcome: str,
    latency_seconds: float,
) -> None:
    """Record a completed substitution request.

    Args:
        strategy: "linear", "knn", "angular" or the unrecognised name.
        outcome: "substituted", "unchanged", or a DeclineReason value
            ("selection", "missing_chord", "unknown_strategy").
        latency_seconds: Wall-clock time spent in the engine.
    """
    substitutions_total.labels(strategy=strategy, outcome=outcome).inc()
    substitution_latency_seconds.labels(strategy=strategy).observe(latency_seconds)


def record_dictionary_reload(size: int) -> None:
    """Increment the reload counter and publish the new dictionary size.

    Args:
        size: Number of chords in the new dictionary.
    """
    dictionary_reloads_total.inc()
    dictionary_size.set(size)


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = substitutor.substitute(ids, [1], KnnStrategy(k=5))
        record_substitution(strategy="knn", outcome="substituted", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
