import os
import logging
from pathlib import Path
from typing import Generator, Optional
from mediaaudit.domain.errors import WalkError
from mediaaudit.domain.events import FileSkipped
from mediaaudit.domain.models import FileKind, ScanTask
from mediaaudit.infrastructure.classifier import FileClassifier
from mediaaudit.infrastructure.event_bus import EventBus


class FileScanner:
    """Recursively scans a directory tree and yields a ScanTask per video file.

    Any access error is fatal to the walk: it is logged and raised as
    WalkError, and nothing further is yielded.
    """

    def __init__(self, classifier: Optional[FileClassifier] = None, event_bus: Optional[EventBus] = None):
        self.classifier = classifier or FileClassifier()
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def _fail(self, path: Path, error: OSError) -> WalkError:
        self.logger.error(f"Failed accessing path {str(path)!r}: {error}")
        return WalkError(path, error)

    def _on_walk_error(self, error: OSError):
        raise self._fail(Path(error.filename or ""), error)

    def _skip(self, path: Path, kind: FileKind):
        if kind == FileKind.OTHER:
            self.logger.info(f"Skipping non-video file: {path.name!r}")
        if self.event_bus is not None:
            self.event_bus.publish(FileSkipped(path=path, kind=kind))

    def scan(self, root_dir: Path) -> Generator[ScanTask, None, None]:
        """Scans the directory depth-first and yields ScanTask objects."""
        root_dir = Path(root_dir)
        try:
            root_stat = root_dir.stat()
        except OSError as e:
            raise self._fail(root_dir, e) from e

        # A file given as root is treated as a one-entry tree
        if not os.path.isdir(root_dir):
            yield from self._visit_file(root_dir, root_stat.st_size)
            return

        for root, dirs, files in os.walk(str(root_dir), onerror=self._on_walk_error):
            root_path = Path(root)

            # Deterministic depth-first order: sort directories and files
            dirs.sort()
            files.sort()

            # os.walk lists directory symlinks but never descends them
            for dir_name in dirs:
                dir_path = root_path / dir_name
                if dir_path.is_symlink():
                    self._skip(dir_path, FileKind.OTHER)

            for file_name in files:
                file_path = root_path / file_name
                try:
                    st = file_path.stat()
                except OSError as e:
                    raise self._fail(file_path, e) from e
                yield from self._visit_file(file_path, st.st_size)

    def _visit_file(self, file_path: Path, size_bytes: int) -> Generator[ScanTask, None, None]:
        kind = self.classifier.classify(file_path.name)
        if kind != FileKind.VIDEO:
            self._skip(file_path, kind)
            return
        yield ScanTask(path=file_path, size_bytes=size_bytes)
