"""
Period-over-period comparison of report metrics.
"""
from app.schemas import ComparisonData, MetricChanges, ReportMetrics

COMPARED_FIELDS = (
    "total_patients",
    "critical_cases",
    "average_stay_duration",
    "bed_occupancy_rate",
    "readmission_rate",
    "mortality_rate",
)


def compare_periods(current: ReportMetrics, previous: ReportMetrics) -> ComparisonData:
    """Signed deltas (current - previous); rates stay as fractions."""
    changes = {f: getattr(current, f) - getattr(previous, f) for f in COMPARED_FIELDS}
    return ComparisonData(previous_period=previous, changes=MetricChanges(**changes))
