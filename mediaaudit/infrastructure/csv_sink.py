import csv
import logging
import threading
from typing import TextIO
from mediaaudit.domain.models import REPORT_HEADERS, MediaRecord


class CsvSink:
    """Append-only CSV report shared by all workers.

    Every row is written and flushed under one lock, so rows never interleave
    and output is visible as soon as each probe finishes. Row order follows
    completion order, not directory order.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._writer = csv.writer(stream, lineterminator="\n")
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def write_header(self) -> bool:
        return self._write(REPORT_HEADERS, "header")

    def write_record(self, record: MediaRecord) -> bool:
        return self._write(record.to_row(), record.name)

    def _write(self, row, label: str) -> bool:
        with self._lock:
            try:
                self._writer.writerow(row)
                self.stream.flush()
            except (OSError, csv.Error, ValueError) as e:
                self.logger.error(f"Failed to flush writes to CSV when writing {label!r}: {e}")
                return False
        return True
