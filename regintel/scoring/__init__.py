"""
Scoring Module - derived 0-100 metrics for companies, executives and opportunities.

Every scorer is a pure function over an entity snapshot; callers persist the
result and decide on alerts with did_cross_threshold.
"""

from regintel.scoring.opportunity_scorer import lead_time_months, opportunity_score
from regintel.scoring.pressure_scorer import pressure_score
from regintel.scoring.thresholds import did_cross_threshold
from regintel.scoring.vulnerability_scorer import vulnerability_score

__all__ = [
    "did_cross_threshold",
    "lead_time_months",
    "opportunity_score",
    "pressure_score",
    "vulnerability_score",
]
