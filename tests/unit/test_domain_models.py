import pytest
from pathlib import Path
from pydantic import ValidationError
from mediaaudit.domain.models import (
    REPORT_HEADERS, BitrateType, MediaRecord, ProbeReport, ScanTask, TaskOutcome
)


def _report(**overrides):
    data = dict(codec="AVC", bitrate_type=BitrateType.VARIABLE, bitrate_mbps=2.0, width=1920, height=1080)
    data.update(overrides)
    return ProbeReport(**data)


def test_report_headers():
    assert REPORT_HEADERS == ["Name", "Codec", "SizeMB", "BitrateType", "BitrateMbps", "Width", "Height"]


def test_scan_task_name():
    task = ScanTask(path=Path("/videos/a/movie.mp4"), size_bytes=10)
    assert task.name == "movie.mp4"


def test_record_from_report_computes_size():
    task = ScanTask(path=Path("/videos/movie.mp4"), size_bytes=10485760)
    record = MediaRecord.from_report(task, _report())

    assert record.name == "movie.mp4"
    assert record.size_mb == 10.0
    assert record.to_row() == ["movie.mp4", "AVC", "10.00", "Variable", "2.000", "1920", "1080"]


def test_record_row_formatting():
    record = MediaRecord(
        name="x.mkv", codec="HEVC", size_mb=1.5, bitrate_type=BitrateType.OVERALL,
        bitrate_mbps=0.12, width=640, height=480,
    )
    assert record.to_row() == ["x.mkv", "HEVC", "1.50", "Overall", "0.120", "640", "480"]


def test_record_defaults_unknown_bitrate():
    record = MediaRecord(name="x.mp4", codec="", size_mb=0.0)
    assert record.bitrate_type == BitrateType.UNKNOWN
    assert record.to_row()[3] == "unknown"


def test_record_is_immutable():
    record = MediaRecord(name="x.mp4", codec="AVC", size_mb=1.0)
    with pytest.raises(ValidationError):
        record.codec = "HEVC"


def test_report_rejects_negative_dimensions():
    with pytest.raises(ValidationError):
        _report(width=-1)


def test_outcome_requires_exactly_one_result():
    task = ScanTask(path=Path("x.mp4"), size_bytes=0)
    record = MediaRecord(name="x.mp4", codec="AVC", size_mb=0.0)

    assert TaskOutcome(task=task, record=record).ok
    assert not TaskOutcome(task=task, error="boom").ok
    with pytest.raises(ValidationError):
        TaskOutcome(task=task)
    with pytest.raises(ValidationError):
        TaskOutcome(task=task, record=record, error="boom")
