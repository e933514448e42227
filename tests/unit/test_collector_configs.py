"""
Unit tests for collector configuration
======================================

Tests for collector_configs.py including:
- CollectorConfig validation and defaults
- Effective ignore patterns
- Dictionary and JSON file loading
- ConfigPresets
"""

import json

import pytest

from collection_errors import ConfigError
from collector_configs import (DEFAULT_IGNORE_PATTERNS, CollectorConfig, ConfigPresets,
                               load_config)


class TestCollectorConfig:
    """Test CollectorConfig validation and initialization"""

    def test_default_config_valid(self):
        """Test that default configuration is valid"""
        config = CollectorConfig()
        assert config.ignore_patterns == DEFAULT_IGNORE_PATTERNS
        assert config.ignore_patterns is not DEFAULT_IGNORE_PATTERNS
        assert config.apply_ignore_filter is False
        assert config.python_batch is False
        assert config.output_format == 'plain'
        assert config.batch_timeout == 60.0

    def test_invalid_output_format(self):
        with pytest.raises(ValueError, match="Invalid output_format"):
            CollectorConfig(output_format='html')

    def test_invalid_batch_timeout(self):
        with pytest.raises(ValueError, match="batch_timeout must be positive"):
            CollectorConfig(batch_timeout=0)

    def test_pattern_lists_must_hold_strings(self):
        with pytest.raises(ValueError, match="extra_ignore_patterns"):
            CollectorConfig(extra_ignore_patterns=['ok', 3])

    def test_effective_ignore_patterns(self):
        config = CollectorConfig(ignore_patterns=['a/', '*.log'], extra_ignore_patterns=['*.log', 'tmp/'])
        assert config.effective_ignore_patterns == ['a/', '*.log', 'tmp/']

    def test_default_patterns_cover_dependency_dirs(self):
        patterns = CollectorConfig().effective_ignore_patterns
        assert 'node_modules/' in patterns
        assert '*.min.js' in patterns


class TestConfigLoading:
    """Test dictionary and file based configuration"""

    def test_from_dict(self):
        config = CollectorConfig.from_dict({'python_batch': True, 'output_format': 'markdown'})
        assert config.python_batch is True
        assert config.output_format == 'markdown'

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            CollectorConfig.from_dict({'num_workers': 4, 'python_batch': True})
        assert exc_info.value.details['unknown_keys'] == ['num_workers']

    def test_invalid_values_wrapped(self):
        with pytest.raises(ConfigError) as exc_info:
            CollectorConfig.from_dict({'output_format': 'xml'})
        assert isinstance(exc_info.value.cause, ValueError)

    def test_non_object_rejected(self):
        with pytest.raises(ConfigError):
            CollectorConfig.from_dict(['python_batch'])

    def test_round_trip_through_dict(self):
        config = ConfigPresets.python_project()
        assert CollectorConfig.from_dict(config.to_dict()) == config

    def test_load_config_file(self, tmp_path):
        path = tmp_path / "collector.json"
        path.write_text(json.dumps({'extra_ignore_patterns': ['*.snap'], 'show_progress': False}))

        config = load_config(path)

        assert config.extra_ignore_patterns == ['*.snap']
        assert config.show_progress is False

    def test_load_config_invalid_json(self, tmp_path):
        path = tmp_path / "collector.json"
        path.write_text("{python_batch: true")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_config(path)

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "missing.json")


class TestConfigPresets:
    """Test preset configurations"""

    def test_smart_filter(self):
        assert ConfigPresets.smart_filter().apply_ignore_filter is True

    def test_python_project(self):
        config = ConfigPresets.python_project()
        assert config.python_batch is True
        assert 'pyproject.toml' in config.marker_files

    def test_minimal(self):
        config = ConfigPresets.minimal()
        assert config.effective_ignore_patterns == []
        assert config.show_progress is False


if __name__ == "__main__":
    pytest.main([__file__])
