"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from src.core.config import (
    ApiConfig,
    FetchConfig,
    PipelineConfig,
    Settings,
    ToolsConfig,
    WorkspaceConfig,
)


class TestWorkspaceConfig:
    def test_defaults(self) -> None:
        w = WorkspaceConfig()
        assert w.root_dir == "/tmp/candidate-processor"
        assert w.archive_dir == "/tmp"

    def test_blank_path_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WorkspaceConfig(root_dir="   ")

    def test_path_stripped(self) -> None:
        w = WorkspaceConfig(archive_dir="  /srv/out  ")
        assert w.archive_dir == "/srv/out"


class TestFetchConfig:
    def test_defaults(self) -> None:
        f = FetchConfig()
        assert f.timeout_s == 60.0
        assert f.follow_redirects is True

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FetchConfig(timeout_s=0)


class TestToolsConfig:
    def test_defaults(self) -> None:
        t = ToolsConfig()
        assert t.converter == "libreoffice"
        assert t.merger == "pdfunite"
        assert t.merger_binary == "pdfunite"
        assert t.timeout_s == 120.0

    def test_unknown_merger_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ToolsConfig(merger="ghostscript")  # type: ignore[arg-type]

    def test_pypdf_merger_accepted(self) -> None:
        assert ToolsConfig(merger="pypdf").merger == "pypdf"


class TestPipelineConfig:
    def test_default_workers(self) -> None:
        assert PipelineConfig().max_workers == 8

    def test_worker_bounds(self) -> None:
        with pytest.raises(ValidationError):
            PipelineConfig(max_workers=0)
        with pytest.raises(ValidationError):
            PipelineConfig(max_workers=257)


class TestApiConfig:
    def test_defaults(self) -> None:
        a = ApiConfig()
        assert a.host == "0.0.0.0"
        assert a.port == 8081

    def test_port_range(self) -> None:
        with pytest.raises(ValidationError):
            ApiConfig(port=70000)


class TestSettings:
    def test_default(self) -> None:
        s = Settings.default()
        assert s.pipeline.max_workers == 8
        assert s.fetch.timeout_s == 60.0

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(dedent("""\
            workspace:
              root_dir: /var/lib/factsheets
              archive_dir: /var/lib/factsheets-out
            fetch:
              timeout_s: 15
            tools:
              merger: pypdf
              timeout_s: 30
            pipeline:
              max_workers: 2
        """))
        s = Settings.from_yaml(config_file)
        assert s.workspace.root_dir == "/var/lib/factsheets"
        assert s.fetch.timeout_s == 15
        assert s.tools.merger == "pypdf"
        assert s.tools.timeout_s == 30
        assert s.pipeline.max_workers == 2
        assert s.api.port == 8081

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("")
        assert Settings.from_yaml(config_file) == Settings.default()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            Settings.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("pipeline:\n  max_workers: -3\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(config_file)

    def test_load_example_settings(self) -> None:
        """The shipped example config must be valid."""
        settings = Settings.from_yaml("config/settings.example.yaml")
        assert settings.tools.converter_binary == "libreoffice"
        assert settings.pipeline.max_workers == 8
