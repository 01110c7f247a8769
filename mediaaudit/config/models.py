from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

DEFAULT_VIDEO_EXTENSIONS = [".mp4", ".mkv", ".avi", ".mov"]
DEFAULT_SIDECAR_EXTENSIONS = [".srt", ".idx", ".sub"]


class GeneralConfig(BaseModel):
    # Each in-flight probe holds a subprocess and a file open; stay under typical fd limits.
    max_concurrency: int = Field(default=200, ge=1, le=4096)
    debug: bool = False
    log_path: Optional[str] = None


class ScanConfig(BaseModel):
    """Extension lists used by the classifier. Matching is case-sensitive."""
    video_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))
    sidecar_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_SIDECAR_EXTENSIONS))

    @field_validator("video_extensions", "sidecar_extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        normalized = []
        for ext in v:
            ext = ext.strip()
            if not ext or ext == ".":
                raise ValueError("Extensions must not be empty")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized

    @field_validator("video_extensions")
    @classmethod
    def validate_video_not_empty(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one video extension is required")
        return v


class ProbeConfig(BaseModel):
    binary: str = "mediainfo"
    timeout_s: Optional[float] = Field(default=None, gt=0)


class OutputConfig(BaseModel):
    summary: bool = True


class AppConfig(BaseModel):
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
