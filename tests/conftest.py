import logging
import stat
import pytest
import yaml
from pathlib import Path
from typing import Optional
from mediaaudit.config.models import AppConfig
from mediaaudit.infrastructure.event_bus import EventBus

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """Returns a sample AppConfig object for testing."""
    return AppConfig(
        general={
            "max_concurrency": 4,
            "debug": False,
        },
        scan={
            "video_extensions": [".mp4", ".mkv", ".avi", ".mov"],
            "sidecar_extensions": [".srt", ".idx", ".sub"],
        },
        probe={
            "binary": "mediainfo",
        },
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "mediaaudit.yaml"

    content = {
        'general': {
            'max_concurrency': 8,
            'debug': True,
        },
        'scan': {
            'video_extensions': ['mp4', '.mkv'],
        },
        'probe': {
            'binary': '/opt/mediainfo/bin/mediainfo',
            'timeout_s': 30,
        },
        'output': {
            'summary': False,
        },
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def dummy_video_files(test_input_dir):
    """Creates dummy video files (plus a sidecar and a junk file) in the input directory."""
    files = []

    for i in range(3):
        f = test_input_dir / f"video{i}.mp4"
        f.write_bytes(b"dummy video content " * 100)  # ~2KB
        files.append(f)

    subdir = test_input_dir / "subdir"
    subdir.mkdir()
    f = subdir / "subvideo.mkv"
    f.write_bytes(b"dummy video content " * 100)
    files.append(f)

    (test_input_dir / "video0.srt").write_text("1\n00:00:01,000 --> 00:00:02,000\nhi\n")
    (test_input_dir / "notes.txt").write_text("ignore me")

    return files

# ============================================================================
# Fake mediainfo (for integration tests)
# ============================================================================

class FakeMediaInfo:
    """
    A stand-in `mediainfo` shell script.

    It checks that the --output=file:// template exists, then prints the
    canned line registered for the probed file's name, or exits 1 if none
    was registered.
    """

    def __init__(self, bin_dir: Path):
        self.path = bin_dir / "mediainfo"
        self.probes_dir = bin_dir / "probes"
        self.probes_dir.mkdir(parents=True)
        self.path.write_text(
            "#!/bin/sh\n"
            "probes=\"$(dirname \"$0\")/probes\"\n"
            "template=\"${1#--output=file://}\"\n"
            "[ -f \"$template\" ] || { echo \"no template: $template\" >&2; exit 2; }\n"
            "name=\"$(basename \"$2\")\"\n"
            "[ -f \"$probes/$name\" ] || { echo \"cannot open $2\" >&2; exit 1; }\n"
            "cat \"$probes/$name\"\n"
        )
        self.path.chmod(self.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def add_video(self, directory: Path, name: str, size_bytes: int, probe_line: Optional[str] = None) -> Path:
        """Creates a sparse file of `size_bytes` and, optionally, its canned probe output."""
        path = directory / name
        with open(path, "wb") as f:
            f.truncate(size_bytes)
        if probe_line is not None:
            (self.probes_dir / name).write_text(probe_line + "\n")
        return path


@pytest.fixture
def fake_mediainfo(tmp_path):
    return FakeMediaInfo(tmp_path / "bin")

# ============================================================================
# Logging isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_logging():
    """Drops handlers installed by setup_logging so later tests don't log to closed streams."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
