"""
Report engine errors. Routers translate these into HTTP responses.
"""


class ReportError(Exception):
    """Base class for report engine failures."""


class EventSourceError(ReportError):
    """One of the event source fetches failed; no partial report is produced."""

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to fetch {source}: {cause}")


class FetchCancelledError(ReportError):
    """The caller cancelled the fetch before all sources completed."""


class StaleReportError(ReportError):
    """A newer report request superseded this one."""

    def __init__(self, client_id: str, generation: int, latest: int):
        self.client_id = client_id
        self.generation = generation
        self.latest = latest
        super().__init__(f"Report request {generation} for {client_id!r} superseded by {latest}")
