"""Prometheus metrics for Reunite.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Scoring metrics
candidates_scored_total = Counter(
    "reunite_candidates_scored_total",
    "Total lost/found pairs scored",
    ["trigger"]  # trigger: lost|found (type of the new item)
)

candidates_prefiltered_total = Counter(
    "reunite_candidates_prefiltered_total",
    "Candidates skipped by the GPS pre-filter before scoring"
)

candidates_unscorable_total = Counter(
    "reunite_candidates_unscorable_total",
    "Candidates dropped because their data could not be scored",
    ["error"]  # error: exception class name, e.g. DimensionMismatchError
)

match_score_histogram = Histogram(
    "reunite_match_score",
    "Total score distribution of scored pairs",
    buckets=[0, 10, 20, 30, 40, 50, 60, 65, 70, 80, 90, 100]
)

match_scoring_duration_seconds = Histogram(
    "reunite_match_scoring_duration_seconds",
    "Time spent scoring one new item against its candidate pool",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Orchestration metrics
matches_created_total = Counter(
    "reunite_matches_created_total",
    "Total matches persisted",
    ["trigger"]
)

match_persistence_failures_total = Counter(
    "reunite_match_persistence_failures_total",
    "Side effects that failed while matching or rejecting",
    ["operation"]  # operation: create_match|set_item_status|revert_item_status
)

# Rejection metrics
match_rejections_total = Counter(
    "reunite_match_rejections_total",
    "Total match rejections",
    ["reason"]  # reason: wrong_item|wrong_brand|wrong_location|already_returned|other|none
)

suspicious_users_flagged_total = Counter(
    "reunite_suspicious_users_flagged_total",
    "Rejections after which the rejecting user carried the suspicious flag"
)

match_acceptances_total = Counter(
    "reunite_match_acceptances_total",
    "Total match acceptances",
    ["role"]  # role: owner|finder
)
