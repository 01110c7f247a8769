import threading
from typing import Optional
from mediaaudit.domain.events import (
    FileSkipped, ProbeFailed, RecordWritten, ScanFinished, SinkWriteFailed
)
from mediaaudit.domain.models import FileKind
from mediaaudit.infrastructure.event_bus import EventBus


class ScanStats:
    """Counts scan events for the end-of-run summary. Thread-safe."""

    def __init__(self, event_bus: EventBus):
        self._lock = threading.Lock()
        self.records_written = 0
        self.probe_failures = 0
        self.sink_failures = 0
        self.skipped_other = 0
        self.skipped_sidecar = 0
        self.dispatched = 0
        self.cancelled = False
        self.walk_error: Optional[str] = None

        event_bus.subscribe(RecordWritten, self._on_record_written)
        event_bus.subscribe(ProbeFailed, self._on_probe_failed)
        event_bus.subscribe(SinkWriteFailed, self._on_sink_failed)
        event_bus.subscribe(FileSkipped, self._on_file_skipped)
        event_bus.subscribe(ScanFinished, self._on_scan_finished)

    def _on_record_written(self, event: RecordWritten):
        with self._lock:
            self.records_written += 1

    def _on_probe_failed(self, event: ProbeFailed):
        with self._lock:
            self.probe_failures += 1

    def _on_sink_failed(self, event: SinkWriteFailed):
        with self._lock:
            self.sink_failures += 1

    def _on_file_skipped(self, event: FileSkipped):
        with self._lock:
            if event.kind == FileKind.SUBTITLE:
                self.skipped_sidecar += 1
            else:
                self.skipped_other += 1

    def _on_scan_finished(self, event: ScanFinished):
        with self._lock:
            self.dispatched = event.dispatched
            self.cancelled = event.cancelled
            self.walk_error = event.walk_error

    def summary_line(self) -> str:
        with self._lock:
            line = (
                f"Probed {self.dispatched} files: {self.records_written} rows, "
                f"{self.probe_failures} failed, {self.sink_failures} write errors; "
                f"skipped {self.skipped_other} non-video, {self.skipped_sidecar} sidecar"
            )
            if self.cancelled:
                line += " (cancelled)"
            if self.walk_error:
                line += " (walk halted)"
            return line
