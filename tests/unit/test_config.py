"""Tests for configuration module."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from routeshift.config import (
    DataConfig,
    OutputConfig,
    RouteshiftConfig,
    ScannerConfig,
    find_config_file,
    generate_example_config,
    load_config,
)
from routeshift.errors import ConfigurationError
from routeshift.parsing.source import DEFAULT_EXCLUDE_PATTERNS


class TestScannerConfig:
    """Tests for ScannerConfig."""

    def test_default_values(self) -> None:
        """Test default exclude patterns."""
        config = ScannerConfig()
        assert config.exclude_patterns == DEFAULT_EXCLUDE_PATTERNS

    def test_defaults_are_copied(self) -> None:
        """Test instances do not share the default list."""
        config = ScannerConfig()
        config.exclude_patterns.append("vendor")
        assert "vendor" not in DEFAULT_EXCLUDE_PATTERNS


class TestOutputConfig:
    """Tests for OutputConfig."""

    def test_default_indent(self) -> None:
        """Test default indent."""
        assert OutputConfig().indent == 2

    def test_negative_indent(self) -> None:
        """Test indent must not be negative."""
        with pytest.raises(ValidationError):
            OutputConfig(indent=-1)


class TestRouteshiftConfig:
    """Tests for RouteshiftConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = RouteshiftConfig()
        assert config.version == 1
        assert config.log_level == "INFO"
        assert config.data == DataConfig()
        assert config.data.known_replacements is None

    def test_log_level_normalized(self) -> None:
        """Test log level is upper-cased."""
        assert RouteshiftConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        """Test invalid log level raises error."""
        with pytest.raises(ValidationError):
            RouteshiftConfig(log_level="LOUD")


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_find_in_current_dir(self, sample_config: Path) -> None:
        """Test finding config in the start directory."""
        assert find_config_file(sample_config.parent) == sample_config

    def test_find_in_parent_dir(self, sample_config: Path) -> None:
        """Test finding config in a parent directory."""
        nested = sample_config.parent / "src" / "pages"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == sample_config

    def test_yaml_extension(self, temp_dir: Path) -> None:
        """Test the .yaml spelling is found too."""
        config_path = temp_dir / ".routeshift.yaml"
        config_path.write_text("version: 1\n")

        assert find_config_file(temp_dir) == config_path


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_from_file(self, sample_config: Path, clean_env: None) -> None:
        """Test loading configuration from file."""
        config = load_config(sample_config)

        assert config.log_level == "DEBUG"
        assert config.scanner.exclude_patterns == ["node_modules", "legacy"]
        assert config.output.indent == 4

    def test_env_overrides_file(self, sample_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ROUTESHIFT_LOG_LEVEL wins over the file."""
        monkeypatch.setenv("ROUTESHIFT_LOG_LEVEL", "error")

        assert load_config(sample_config).log_level == "ERROR"

    def test_missing_file_uses_defaults(self, temp_dir: Path, clean_env: None) -> None:
        """Test a path that does not exist gives defaults."""
        config = load_config(temp_dir / ".routeshift.yml")
        assert config == RouteshiftConfig()

    def test_empty_file(self, temp_dir: Path, clean_env: None) -> None:
        """Test an empty file gives defaults."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("")

        assert load_config(config_path) == RouteshiftConfig()

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """Test malformed YAML raises ConfigurationError."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("scanner: [unclosed\n")

        with pytest.raises(ConfigurationError) as excinfo:
            load_config(config_path)

        assert "Invalid YAML" in excinfo.value.message

    def test_non_mapping(self, temp_dir: Path) -> None:
        """Test a YAML list is rejected."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_invalid_values(self, temp_dir: Path, clean_env: None) -> None:
        """Test validation errors become ConfigurationError."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("output:\n  indent: -2\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_data_paths(self, temp_dir: Path, clean_env: None) -> None:
        """Test data table overrides are parsed as paths."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("data:\n  transform_rules: ./rules.json\n")

        config = load_config(config_path)

        assert config.data.transform_rules == Path("rules.json")
        assert config.data.known_replacements is None


class TestGenerateExampleConfig:
    """Tests for generate_example_config."""

    def test_example_is_valid(self) -> None:
        """Test the example config loads into the model."""
        data = yaml.safe_load(generate_example_config())
        config = RouteshiftConfig(**data)

        assert config.version == 1
        assert "node_modules" in config.scanner.exclude_patterns
        assert config.data.known_replacements is None
