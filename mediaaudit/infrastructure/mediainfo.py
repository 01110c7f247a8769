"""mediainfo adapter: one subprocess per file, seven comma-separated fields back.

mediainfo's inline --Inform template cannot address the General and Video
sections at once, so the template is written to a temp file and loaded with
--output=file://. That keeps it to a single invocation per file.
"""

import os
import re
import logging
import tempfile
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional
from mediaaudit.domain.errors import ProbeParseError, ProbeProcessError
from mediaaudit.domain.models import BitrateType, ProbeReport
from mediaaudit.domain.units import bitrate_mbps

TEMPLATE = (
    "General;%OverallBitRate%,\n"
    "Video;%Format%,%Width%,%Height%,%BitRate_Maximum%,%BitRate%,%BitRate_Nominal%"
)
TEMPLATE_PREFIX = "mediaauditTemplate"
FIELD_COUNT = 7

# Output field positions
OVERALL_BITRATE = 0
FORMAT = 1
WIDTH = 2
HEIGHT = 3
MAX_BITRATE = 4
BITRATE = 5
NOMINAL_BITRATE = 6

# First non-empty field wins
BITRATE_PRIORITY = (
    (MAX_BITRATE, BitrateType.VARIABLE),
    (BITRATE, BitrateType.CONSTANT),
    (NOMINAL_BITRATE, BitrateType.NOMINAL),
    (OVERALL_BITRATE, BitrateType.OVERALL),
)

_INT_RE = re.compile(r"^[+-]?\d+$")

logger = logging.getLogger(__name__)


@contextmanager
def template_file(directory: Optional[str] = None) -> Generator[Path, None, None]:
    """Writes the field template to a temp file and removes it on exit."""
    fd, name = tempfile.mkstemp(prefix=TEMPLATE_PREFIX, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(TEMPLATE)
        logger.debug(f"Template written: {path}")
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def _parse_int(path: Path, field: str, value: str, fields: List[str]) -> int:
    if not _INT_RE.match(value):
        raise ProbeParseError(path, f"Invalid {field} {value!r} for file {str(path)!r}: {fields}")
    return int(value)


def parse_report(path: Path, output: str) -> ProbeReport:
    """Parses one line of mediainfo template output into a ProbeReport."""
    fields = output.strip().split(",")
    if len(fields) != FIELD_COUNT:
        raise ProbeParseError(path, f"Missing full info for file {str(path)!r}: {fields}")

    codec = fields[FORMAT]
    width = _parse_int(path, "width", fields[WIDTH], fields)
    height = _parse_int(path, "height", fields[HEIGHT], fields)
    if width < 0 or height < 0:
        raise ProbeParseError(path, f"Negative dimensions for file {str(path)!r}: {fields}")

    for index, bitrate_type in BITRATE_PRIORITY:
        if fields[index] != "":
            bitrate = _parse_int(path, "bitrate", fields[index], fields)
            break
    else:
        raise ProbeParseError(path, f"Unable to determine bitrate for file {str(path)!r}: {fields}")

    return ProbeReport(
        codec=codec,
        bitrate_type=bitrate_type,
        bitrate_mbps=bitrate_mbps(bitrate),
        width=width,
        height=height,
    )


class MediaInfoAdapter:
    """Wrapper around mediainfo using a shared, read-only template file."""

    def __init__(self, template_path: Path, binary: str = "mediainfo", timeout_s: Optional[float] = None):
        self.template_path = Path(template_path)
        self.binary = binary
        self.timeout_s = timeout_s

    def build_command(self, file_path: Path) -> List[str]:
        return [self.binary, f"--output=file://{self.template_path}", str(file_path)]

    def read_fields(self, file_path: Path) -> str:
        """Runs mediainfo once and returns its raw stdout."""
        cmd = self.build_command(file_path)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_s)
        except subprocess.TimeoutExpired:
            raise ProbeProcessError(file_path, f"mediainfo timed out after {self.timeout_s}s for {str(file_path)!r}")
        except OSError as e:
            raise ProbeProcessError(file_path, f"mediainfo could not be started for {str(file_path)!r}: {e}")

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ProbeProcessError(
                file_path,
                f"mediainfo failed for {str(file_path)!r} (exit {result.returncode}): {stderr}",
                returncode=result.returncode,
            )
        return result.stdout

    def get_report(self, file_path: Path) -> ProbeReport:
        return parse_report(file_path, self.read_fields(file_path))
