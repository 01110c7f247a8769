from typing import Iterable, Optional, Tuple
from mediaaudit.config.models import DEFAULT_SIDECAR_EXTENSIONS, DEFAULT_VIDEO_EXTENSIONS
from mediaaudit.domain.models import FileKind


class FileClassifier:
    """Decides whether a file name is a video, a subtitle/sidecar, or neither.

    Matching is suffix based and case-sensitive. Sidecar extensions are
    checked first, so they win if a name matches both lists.
    """

    def __init__(
        self,
        video_extensions: Optional[Iterable[str]] = None,
        sidecar_extensions: Optional[Iterable[str]] = None,
    ):
        self.video_extensions: Tuple[str, ...] = tuple(
            video_extensions if video_extensions is not None else DEFAULT_VIDEO_EXTENSIONS
        )
        self.sidecar_extensions: Tuple[str, ...] = tuple(
            sidecar_extensions if sidecar_extensions is not None else DEFAULT_SIDECAR_EXTENSIONS
        )

    def classify(self, name: str) -> FileKind:
        if self.sidecar_extensions and name.endswith(self.sidecar_extensions):
            return FileKind.SUBTITLE
        if name.endswith(self.video_extensions):
            return FileKind.VIDEO
        return FileKind.OTHER


_default = FileClassifier()


def classify(name: str) -> FileKind:
    """Classifies `name` using the default extension lists."""
    return _default.classify(name)
