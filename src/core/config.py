"""Configuration models and YAML loader for the factsheet pipeline."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator


class WorkspaceConfig(BaseModel):
    """Where per-job workspaces and finished archives live."""

    root_dir: str = "/tmp/candidate-processor"
    archive_dir: str = "/tmp"

    @field_validator("root_dir", "archive_dir")
    @classmethod
    def path_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "workspace paths must not be empty"
            raise ValueError(msg)
        return v.strip()


class FetchConfig(BaseModel):
    """Resume download settings."""

    timeout_s: float = Field(default=60.0, gt=0)
    follow_redirects: bool = True


class ToolsConfig(BaseModel):
    """External converter / merger selection."""

    converter: Literal["libreoffice"] = "libreoffice"
    converter_binary: str = "libreoffice"
    merger: Literal["pdfunite", "pypdf"] = "pdfunite"
    merger_binary: str = "pdfunite"
    timeout_s: float = Field(default=120.0, gt=0)


class PipelineConfig(BaseModel):
    """Concurrency limits for a single job."""

    max_workers: int = Field(default=8, ge=1, le=256)


class ApiConfig(BaseModel):
    """HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8081, ge=1, le=65535)


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @classmethod
    def default(cls) -> "Settings":
        """Settings with every section at its defaults."""
        return cls()

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
