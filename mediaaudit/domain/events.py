"""Domain events for the scan pipeline.

Events flow through the EventBus so the dispatcher and reporter stay
decoupled from the summary/statistics layer.

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel

from .models import FileKind, MediaRecord


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class ScanStarted(Event):
    """Emitted before the walk begins (after the CSV header is written)."""

    root: Path


class FileSkipped(Event):
    """Emitted for every regular file that is not dispatched for probing."""

    path: Path
    kind: FileKind


class RecordWritten(Event):
    """Emitted after a row has been written and flushed to the sink."""

    record: MediaRecord


class SinkWriteFailed(Event):
    """Emitted when the sink could not write or flush a row."""

    record: MediaRecord
    error_message: str


class ProbeFailed(Event):
    """Emitted when a file's probe failed; no row is written for it."""

    path: Path
    error_message: str


class ScanFinished(Event):
    """Emitted once all in-flight tasks have drained."""

    dispatched: int
    cancelled: bool = False
    walk_error: Optional[str] = None
