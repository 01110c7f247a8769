"""Bounded dispatcher for per-file probes.

The walk runs on the calling thread. Before each task is submitted to the
thread pool one capacity token is taken from the CapacityPool; when the pool
is exhausted the walk blocks until a worker returns its token. Workers release
their token in a `finally`, whatever the outcome. When the walk ends (or
fails), the dispatcher takes the whole capacity as a barrier, which succeeds
only after every in-flight task has finished.
"""

import logging
import threading
import concurrent.futures
from typing import Iterable, Optional
from mediaaudit.domain.errors import ProbeError, WalkError
from mediaaudit.domain.events import ScanFinished
from mediaaudit.domain.models import DispatchSummary, MediaRecord, ScanTask, TaskOutcome
from mediaaudit.infrastructure.event_bus import EventBus
from mediaaudit.infrastructure.mediainfo import MediaInfoAdapter
from mediaaudit.pipeline.capacity import CapacityPool
from mediaaudit.pipeline.reporter import ScanReporter

CANCEL_POLL_S = 0.5


class Dispatcher:
    """Runs one probe per ScanTask with at most `capacity` in flight.

    Args:
        adapter: MediaInfoAdapter (or anything with `get_report(path)`).
        reporter: ScanReporter consuming each TaskOutcome.
        capacity: Number of capacity tokens (max concurrent probes).
        event_bus: Optional EventBus for ScanFinished.
        cancel_event: Optional Event; once set, no new tasks are dispatched.
    """

    def __init__(
        self,
        adapter: MediaInfoAdapter,
        reporter: ScanReporter,
        capacity: int = 200,
        event_bus: Optional[EventBus] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.adapter = adapter
        self.reporter = reporter
        self.pool = CapacityPool(capacity)
        self.event_bus = event_bus
        self.cancel_event = cancel_event or threading.Event()
        self.logger = logging.getLogger(__name__)

    def cancel(self):
        self.cancel_event.set()

    def _probe(self, task: ScanTask) -> TaskOutcome:
        try:
            report = self.adapter.get_report(task.path)
            record = MediaRecord.from_report(task, report)
        except ProbeError as e:
            return TaskOutcome(task=task, error=str(e))
        except Exception as e:
            return TaskOutcome(task=task, error=f"Unexpected error probing {str(task.path)!r}: {e}")
        return TaskOutcome(task=task, record=record)

    def _work(self, task: ScanTask):
        try:
            self.reporter.report(self._probe(task))
        except Exception as e:
            self.logger.error(f"Failed to report result for {str(task.path)!r}: {e}")
        finally:
            self.pool.release()

    def _acquire_token(self) -> bool:
        """Takes one token, polling the cancel event while the pool is full."""
        while not self.cancel_event.is_set():
            if self.pool.acquire(timeout=CANCEL_POLL_S):
                return True
        return False

    def _drain(self):
        self.pool.acquire(self.pool.capacity)
        self.pool.release(self.pool.capacity)

    def run(self, tasks: Iterable[ScanTask]) -> DispatchSummary:
        dispatched = 0
        cancelled = False
        walk_error: Optional[str] = None

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.pool.capacity, thread_name_prefix="probe"
        ) as executor:
            try:
                for task in tasks:
                    if not self._acquire_token():
                        cancelled = True
                        self.logger.info("Cancellation requested, no new probes will be started")
                        break
                    try:
                        executor.submit(self._work, task)
                    except BaseException:
                        self.pool.release()
                        raise
                    dispatched += 1
                    self.logger.debug(f"DISPATCH: {task.name} (in flight: {self.pool.in_use})")
            except WalkError as e:
                walk_error = str(e)
                raise
            except KeyboardInterrupt:
                cancelled = True
                self.cancel_event.set()
                self.logger.info("Ctrl+C detected - waiting for in-flight probes to finish...")
                raise
            finally:
                self._drain()
                self.logger.info(f"All probes finished: dispatched={dispatched}, cancelled={cancelled}")
                if self.event_bus is not None:
                    self.event_bus.publish(ScanFinished(
                        dispatched=dispatched, cancelled=cancelled, walk_error=walk_error
                    ))

        return DispatchSummary(dispatched=dispatched, cancelled=cancelled)
