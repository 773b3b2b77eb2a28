"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


recommendation_requests_total = Counter(
    "outfit_recommendation_requests_total",
    "Total number of recommendation requests by outcome.",
    ["outcome"],
)

recommendation_duration_seconds = Histogram(
    "outfit_recommendation_duration_seconds",
    "Time spent building context and ranking the catalog.",
)

recommended_outfits_total = Counter(
    "outfit_recommended_outfits_total",
    "Total number of outfits returned in recommendation lists.",
)

stale_results_total = Counter(
    "outfit_recommendation_stale_results_total",
    "Results discarded because a newer request for the same key arrived.",
)
