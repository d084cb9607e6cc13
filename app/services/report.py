"""
Report assembly: metrics + activities (+ comparison) for a window.
"""
import logging
import threading
from collections import OrderedDict
from datetime import date
from typing import Optional

from app.config import settings
from app.exceptions import StaleReportError
from app.schemas import EventBundle, ReportData, TimeWindow
from app.services.activities import compute_activities
from app.services.comparison import compare_periods
from app.services.events import EventSource
from app.services.metrics import compute_metrics

logger = logging.getLogger(__name__)


def assemble_report(
    bundle: EventBundle,
    previous_bundle: Optional[EventBundle] = None,
    total_beds: Optional[int] = None,
    deceased_condition: Optional[str] = None,
    today: Optional[date] = None,
) -> ReportData:
    """Compose a report; comparison is present only when a previous bundle is given."""
    metrics = compute_metrics(bundle, total_beds=total_beds, deceased_condition=deceased_condition)
    activities = compute_activities(bundle, today=today)
    comparison = None
    if previous_bundle is not None:
        previous = compute_metrics(previous_bundle, total_beds=total_beds, deceased_condition=deceased_condition)
        comparison = compare_periods(metrics, previous)
    return ReportData(metrics=metrics, activities=activities, comparison=comparison)


class RequestSequencer:
    """
    Monotonic generation counter per client; only the latest generation is current.
    At most max_clients keys are tracked, least recently begun evicted first.
    """

    def __init__(self, max_clients: Optional[int] = None):
        self._lock = threading.Lock()
        self._latest = OrderedDict()
        self.max_clients = settings.sequencer_max_clients if max_clients is None else max_clients

    def begin(self, client_id: str) -> int:
        with self._lock:
            generation = self._latest.pop(client_id, 0) + 1
            self._latest[client_id] = generation
            while len(self._latest) > self.max_clients:
                evicted, _ = self._latest.popitem(last=False)
                logger.debug("Evicted request generation for client %s", evicted)
            return generation

    def __len__(self) -> int:
        with self._lock:
            return len(self._latest)

    def latest(self, client_id: str) -> int:
        with self._lock:
            return self._latest.get(client_id, 0)

    def is_current(self, client_id: str, generation: int) -> bool:
        return self.latest(client_id) == generation


class ReportService:
    def __init__(
        self,
        source: Optional[EventSource] = None,
        sequencer: Optional[RequestSequencer] = None,
        total_beds: Optional[int] = None,
        deceased_condition: Optional[str] = None,
    ):
        self.source = EventSource() if source is None else source
        self.sequencer = RequestSequencer() if sequencer is None else sequencer
        self.total_beds = total_beds
        self.deceased_condition = deceased_condition

    def generate(
        self,
        window: TimeWindow,
        previous_window: Optional[TimeWindow] = None,
        client_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        today: Optional[date] = None,
    ) -> ReportData:
        generation = self.sequencer.begin(client_id) if client_id else None

        bundle = self.source.fetch(window, cancel_event=cancel_event)
        previous_bundle = None
        if previous_window is not None:
            previous_bundle = self.source.fetch(previous_window, cancel_event=cancel_event)

        report = assemble_report(
            bundle,
            previous_bundle,
            total_beds=self.total_beds,
            deceased_condition=self.deceased_condition,
            today=today,
        )

        if generation is not None and not self.sequencer.is_current(client_id, generation):
            latest = self.sequencer.latest(client_id)
            logger.info("Discarding stale report %d for client %s (latest %d)", generation, client_id, latest)
            raise StaleReportError(client_id, generation, latest)
        return report
