"""Prometheus metrics for monitoring risk tiers, fired rules, alerts and scoring-service health"""

from prometheus_client import Counter, Histogram

from fraudwatch.domain.models import FraudAssessment

# Assessment metrics
assessment_counter = Counter(
    "fraudwatch_assessment_total",
    "Total fraud assessments produced",
    ["risk_level"],  # high | medium | low
)

risk_factor_counter = Counter(
    "fraudwatch_risk_factor_total",
    "Risk factors fired across assessments",
    ["factor"],
)

# Live feed metrics
feed_transaction_counter = Counter(
    "fraudwatch_feed_transactions_total",
    "Transactions ingested by the live feed",
)

alert_counter = Counter(
    "fraudwatch_alerts_total",
    "Alerts raised by the live feed",
    ["severity"],  # critical | high | medium | low
)

# Remote scoring metrics
scoring_latency_histogram = Histogram(
    "scoring_service_latency_seconds",
    "Remote scoring service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

scoring_failures_counter = Counter(
    "scoring_service_failures_total",
    "Failed remote scoring calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(assessment: FraudAssessment) -> None:
    """Record tier distribution and which rules fired"""
    assessment_counter.labels(risk_level=assessment.risk_level).inc()
    for factor in assessment.risk_factors:
        risk_factor_counter.labels(factor=factor).inc()
