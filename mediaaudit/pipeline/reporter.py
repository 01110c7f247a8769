import logging
from typing import Optional
from mediaaudit.domain.events import ProbeFailed, RecordWritten, SinkWriteFailed
from mediaaudit.domain.models import TaskOutcome
from mediaaudit.infrastructure.csv_sink import CsvSink
from mediaaudit.infrastructure.event_bus import EventBus


class ScanReporter:
    """Consumes task outcomes: rows go to the sink, failures to the log."""

    def __init__(self, sink: CsvSink, event_bus: Optional[EventBus] = None):
        self.sink = sink
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def _publish(self, event):
        if self.event_bus is not None:
            self.event_bus.publish(event)

    def report(self, outcome: TaskOutcome) -> bool:
        """Returns True if a row was written."""
        if not outcome.ok:
            self.logger.error(outcome.error)
            self._publish(ProbeFailed(path=outcome.task.path, error_message=outcome.error))
            return False

        record = outcome.record
        if self.sink.write_record(record):
            self.logger.debug(f"ROW: {record.name} {record.codec} {record.bitrate_type.value}")
            self._publish(RecordWritten(record=record))
            return True

        self._publish(SinkWriteFailed(record=record, error_message=f"Failed to write row for {record.name!r}"))
        return False
