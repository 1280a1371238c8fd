"""Unit tests for configuration management."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from bpax.config import (
    AnalysisConfig,
    BpaxConfig,
    IntakeConfig,
    OutputConfig,
    OutputFormat,
    create_default_config,
    find_config_file,
    load_config,
)


class TestIntakeConfig:
    """Test IntakeConfig model."""

    def test_defaults(self):
        config = IntakeConfig()
        assert config.max_file_size_mb == 50
        assert config.max_file_size_bytes == 50 * 1024 * 1024
        assert config.allowed_extensions == [".bpprocess", ".bpobject", ".bprelease"]

    def test_aliases(self):
        """Test camelCase keys from JSON config files."""
        config = IntakeConfig(**{"maxFileSizeMb": 5, "allowedExtensions": [".BPPROCESS"]})
        assert config.max_file_size_mb == 5
        assert config.allowed_extensions == [".bpprocess"]

    def test_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            IntakeConfig(max_file_size_mb=0)

    def test_extension_needs_dot(self):
        with pytest.raises(ValidationError, match="must start with"):
            IntakeConfig(allowed_extensions=["bpprocess"])


class TestAnalysisConfig:
    """Test AnalysisConfig model."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.pattern_fallback is True
        assert config.main_location == "Main Process"
        assert config.unknown_subsheet == "Unknown Subsheet"

    def test_blank_label_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisConfig(main_location="  ")


class TestOutputConfig:
    """Test OutputConfig model."""

    def test_enum_values_stored(self):
        config = OutputConfig(format="table")
        assert config.format == OutputFormat.TABLE.value

    def test_invalid_indent(self):
        with pytest.raises(ValidationError):
            OutputConfig(indent=12)


class TestBpaxConfig:
    """Test complete BpaxConfig model."""

    def test_default_config(self):
        config = create_default_config()
        assert config.output.format == "json"
        assert config.output.indent == 2
        assert config.logging.level == "warn"

    def test_config_from_dict(self):
        config = BpaxConfig(**{
            "intake": {"maxFileSizeMb": 10},
            "analysis": {"patternFallback": False, "mainLocation": "Main Page"},
            "output": {"format": "table", "indent": 4},
            "logging": {"level": "debug"},
        })
        assert config.intake.max_file_size_mb == 10
        assert config.analysis.pattern_fallback is False
        assert config.analysis.main_location == "Main Page"
        assert config.output.format == "table"
        assert config.logging.level == "debug"

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            BpaxConfig(**{"lake": {}})

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            BpaxConfig(**{"logging": {"level": "verbose"}})


class TestConfigLoading:
    """Test configuration file loading."""

    def test_load_config_file(self):
        with TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / ".bpax.json"
            config_path.write_text(json.dumps({"output": {"indent": 0}}))

            config = load_config(config_path)
            assert config.output.indent == 0

    def test_load_invalid_json(self):
        with TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / ".bpax.json"
            config_path.write_text("{not json")

            with pytest.raises(ValueError, match="Invalid JSON"):
                load_config(config_path)

    def test_load_invalid_values(self):
        with TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / ".bpax.json"
            config_path.write_text(json.dumps({"intake": {"maxFileSizeMb": -1}}))

            with pytest.raises(ValueError, match="Failed to load config"):
                load_config(config_path)

    def test_missing_file_gives_defaults(self):
        with TemporaryDirectory() as temp_dir:
            config = load_config(Path(temp_dir) / "absent.json")
            assert config == create_default_config()

    def test_find_config_in_parent(self):
        """Test search walks up the directory tree."""
        with TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / ".bpax.json").write_text("{}")
            nested = root / "exports" / "q3"
            nested.mkdir(parents=True)

            assert find_config_file(nested) == (root / ".bpax.json").resolve()

    def test_load_without_path_searches_cwd(self):
        with TemporaryDirectory() as temp_dir:
            (Path(temp_dir) / ".bpax.json").write_text(json.dumps({"output": {"format": "table"}}))

            with patch("bpax.config.Path.cwd", return_value=Path(temp_dir)):
                config = load_config()

            assert config.output.format == "table"
