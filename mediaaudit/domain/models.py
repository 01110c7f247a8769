from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .units import size_mb

REPORT_HEADERS = ["Name", "Codec", "SizeMB", "BitrateType", "BitrateMbps", "Width", "Height"]


class FileKind(str, Enum):
    VIDEO = "VIDEO"
    SUBTITLE = "SUBTITLE"
    OTHER = "OTHER"


class BitrateType(str, Enum):
    VARIABLE = "Variable"
    CONSTANT = "Constant"
    NOMINAL = "Nominal"
    OVERALL = "Overall"
    UNKNOWN = "unknown"


class ScanTask(BaseModel):
    path: Path
    size_bytes: int = Field(ge=0)

    @property
    def name(self) -> str:
        return self.path.name


class ProbeReport(BaseModel):
    """Parsed mediainfo fields for one file (size is not part of the probe)."""
    model_config = ConfigDict(frozen=True)

    codec: str
    bitrate_type: BitrateType
    bitrate_mbps: float
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class MediaRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    codec: str
    size_mb: float
    bitrate_type: BitrateType = BitrateType.UNKNOWN
    bitrate_mbps: float = 0.0
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    @classmethod
    def from_report(cls, task: ScanTask, report: ProbeReport) -> "MediaRecord":
        return cls(
            name=task.name,
            codec=report.codec,
            size_mb=size_mb(task.size_bytes),
            bitrate_type=report.bitrate_type,
            bitrate_mbps=report.bitrate_mbps,
            width=report.width,
            height=report.height,
        )

    def to_row(self) -> List[str]:
        return [
            self.name,
            self.codec,
            f"{self.size_mb:.2f}",
            self.bitrate_type.value,
            f"{self.bitrate_mbps:.3f}",
            str(self.width),
            str(self.height),
        ]


class TaskOutcome(BaseModel):
    """Result of one ScanTask: exactly one of `record` or `error` is set."""
    model_config = ConfigDict(frozen=True)

    task: ScanTask
    record: Optional[MediaRecord] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def validate_exclusive(self):
        if (self.record is None) == (self.error is None):
            raise ValueError("TaskOutcome needs exactly one of record or error")
        return self

    @property
    def ok(self) -> bool:
        return self.record is not None


class DispatchSummary(BaseModel):
    dispatched: int = 0
    cancelled: bool = False
