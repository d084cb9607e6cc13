"""
Event source adapter: fetches the five in-window record collections concurrently.
"""
import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal
from app.exceptions import EventSourceError, FetchCancelledError
from app.models import Discharge, LabResult, Medication, Patient, Vital
from app.schemas import (
    AdmissionRecord,
    DischargeRecord,
    EventBundle,
    LabRecord,
    MedicationRecord,
    TimeWindow,
    VitalsRecord,
)

logger = logging.getLogger(__name__)

# bundle field -> (table, governing timestamp, record type)
SOURCES = {
    "admissions": (Patient, Patient.admission_date, AdmissionRecord),
    "medications": (Medication, Medication.created_at, MedicationRecord),
    "lab_results": (LabResult, LabResult.created_at, LabRecord),
    "discharges": (Discharge, Discharge.discharge_date, DischargeRecord),
    "vitals": (Vital, Vital.created_at, VitalsRecord),
}

_CANCEL_POLL_SECONDS = 0.05


class EventSource:
    """
    Reads admissions, medications, lab results, discharges and vitals for a window.
    Each source runs on its own worker thread with its own session; the bundle is
    returned only when all five succeed.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        max_workers: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.max_workers = settings.fetch_max_workers if max_workers is None else max_workers

    def fetch_source(self, source: str, window: TimeWindow) -> list:
        """Records of one source whose governing timestamp is within [start, end]."""
        model, column, record_cls = SOURCES[source]
        q = (
            select(model)
            .where(column >= window.start, column <= window.end)
            .order_by(column)
        )
        with self.session_factory() as db:
            rows = db.execute(q).scalars().all()
            records = [record_cls.model_validate(r) for r in rows]
        logger.debug("Fetched %d %s for %s - %s", len(records), source, window.start, window.end)
        return records

    def fetch(self, window: TimeWindow, cancel_event: Optional[threading.Event] = None) -> EventBundle:
        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError("fetch cancelled before start")

        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="event-source")
        try:
            futures = {pool.submit(self.fetch_source, name, window): name for name in SOURCES}
            pending = set(futures)
            while pending:
                timeout = _CANCEL_POLL_SECONDS if cancel_event is not None else None
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_EXCEPTION)
                for fut in done:
                    exc = fut.exception()
                    if exc is not None:
                        source = futures[fut]
                        logger.error("Event source %s failed", source, exc_info=exc)
                        raise EventSourceError(source, exc) from exc
                if cancel_event is not None and cancel_event.is_set():
                    raise FetchCancelledError("fetch cancelled with %d sources pending" % len(pending))
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError("fetch cancelled after completion")
            results = {name: fut.result() for fut, name in futures.items()}
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        return EventBundle(**results)
