"""
Unit tests for period comparison, report assembly and request sequencing.
"""
from datetime import date, datetime

import pytest

from app.exceptions import StaleReportError
from app.schemas import EventBundle, ReportMetrics, TimeWindow
from app.services.comparison import compare_periods
from app.services.report import ReportService, RequestSequencer, assemble_report


def test_comparison_deltas_are_signed():
    current = ReportMetrics(total_patients=4, critical_cases=1, average_stay_duration=2.0,
                            bed_occupancy_rate=0.1, readmission_rate=0.0, mortality_rate=0.25,
                            medications_given=9, lab_tests=9)
    previous = ReportMetrics(total_patients=10, critical_cases=3, average_stay_duration=1.5,
                             bed_occupancy_rate=0.3, readmission_rate=0.1, mortality_rate=0.0,
                             medications_given=1, lab_tests=1)
    comparison = compare_periods(current, previous)

    assert comparison.previous_period == previous
    assert comparison.changes.total_patients == -6
    assert comparison.changes.critical_cases == -2
    assert comparison.changes.average_stay_duration == pytest.approx(0.5)
    assert comparison.changes.bed_occupancy_rate == pytest.approx(-0.2)
    assert comparison.changes.readmission_rate == pytest.approx(-0.1)
    assert comparison.changes.mortality_rate == pytest.approx(0.25)
    assert "medications_given" not in comparison.changes.model_dump()
    assert "lab_tests" not in comparison.changes.model_dump()


def test_assemble_without_previous_has_no_comparison(admission, bundle):
    report = assemble_report(bundle([admission()]), today=date(2024, 3, 15))
    assert report.comparison is None
    assert report.metrics.total_patients == 1
    assert len(report.activities.daily_activities) == 4


def test_assemble_with_previous_bundle(admission, bundle):
    current = bundle([admission(status="Critical"), admission()])
    previous = bundle([admission()])
    report = assemble_report(current, previous, today=date(2024, 3, 15))
    assert report.comparison is not None
    assert report.comparison.previous_period.total_patients == 1
    assert report.comparison.changes.total_patients == 1
    assert report.comparison.changes.critical_cases == 1


def test_window_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        TimeWindow(start=datetime(2024, 3, 2), end=datetime(2024, 3, 1))


def test_previous_window_is_adjacent_and_equal_length():
    window = TimeWindow.from_dates(date(2024, 3, 1), date(2024, 3, 31))
    previous = window.previous()
    assert previous.end == window.start
    assert previous.span == window.span


def test_sequencer_tracks_latest_generation():
    seq = RequestSequencer()
    first = seq.begin("ward-a")
    second = seq.begin("ward-a")
    other = seq.begin("ward-b")
    assert not seq.is_current("ward-a", first)
    assert seq.is_current("ward-a", second)
    assert seq.is_current("ward-b", other)


class _FakeSource:
    def __init__(self, bundle, on_fetch=None):
        self.bundle = bundle
        self.on_fetch = on_fetch
        self.windows = []

    def fetch(self, window, cancel_event=None):
        self.windows.append(window)
        if self.on_fetch:
            self.on_fetch()
        return self.bundle


def test_service_fetches_previous_window_when_comparing(admission, bundle):
    source = _FakeSource(bundle([admission()]))
    service = ReportService(source=source)
    window = TimeWindow.from_dates(date(2024, 3, 1), date(2024, 3, 31))

    report = service.generate(window, previous_window=window.previous())

    assert source.windows == [window, window.previous()]
    assert report.comparison.changes.total_patients == 0


def test_service_discards_superseded_request(admission, bundle):
    sequencer = RequestSequencer()
    # a newer request for the same client arrives while this one is fetching
    source = _FakeSource(bundle([admission()]), on_fetch=lambda: sequencer.begin("ward-a"))
    service = ReportService(source=source, sequencer=sequencer)
    window = TimeWindow.from_dates(date(2024, 3, 1), date(2024, 3, 31))

    with pytest.raises(StaleReportError) as excinfo:
        service.generate(window, client_id="ward-a")
    assert excinfo.value.generation == 1
    assert excinfo.value.latest == 2


def test_service_returns_latest_request(admission, bundle):
    service = ReportService(source=_FakeSource(EventBundle()))
    window = TimeWindow.from_dates(date(2024, 3, 1), date(2024, 3, 31))
    report = service.generate(window, client_id="ward-a")
    assert report.metrics == ReportMetrics()


def test_sequencer_evicts_least_recent_clients_past_cap():
    seq = RequestSequencer(max_clients=3)
    for i in range(1000):
        seq.begin(f"client-{i}")

    assert len(seq) == 3
    assert seq.latest("client-0") == 0
    assert seq.latest("client-999") == 1


def test_sequencer_begin_refreshes_client_recency():
    seq = RequestSequencer(max_clients=2)
    seq.begin("ward-a")
    seq.begin("ward-b")
    seq.begin("ward-a")
    seq.begin("ward-c")

    assert seq.latest("ward-a") == 2
    assert seq.latest("ward-b") == 0
    assert seq.latest("ward-c") == 1
