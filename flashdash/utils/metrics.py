"""
Centralized Prometheus metrics.

All application metrics are defined here to prevent duplication
and ensure consistent labeling across modules.
"""

from prometheus_client import Counter, Histogram


# ── Auth Metrics ──────────────────────────────────────────────────────────────

login_count = Counter(
    "flashdash_logins_total",
    "Login attempts by outcome",
    ["outcome"]
)


# ── Lead Submission Metrics ───────────────────────────────────────────────────

lead_submission_count = Counter(
    "flashdash_lead_submissions_total",
    "Lead submissions by outcome",
    ["outcome"]  # success | error | rejected
)

forth_request_latency = Histogram(
    "flashdash_forth_request_seconds",
    "ForthCRM lead intake call latency",
    ["outcome"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0]
)
