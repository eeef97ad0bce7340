"""Tests for config.yaml loading."""

import pytest

from mep.core.config import (
    get_config,
    get_config_value,
    get_discipline_defaults,
    get_log_level_name,
    get_output_format_name,
)


class TestPackagedConfig:
    def test_loads_bundled_file(self):
        config = get_config(reload=True)
        assert "defaults" in config

    def test_output_format_default(self):
        assert get_config_value("output", "format") == "human"

    def test_every_discipline_has_defaults(self):
        for discipline in ("hvac", "electrical", "plumbing", "fire"):
            assert get_discipline_defaults(discipline), discipline


class TestConfigLoading:
    def test_missing_file_raises(self, temp_config):
        with pytest.raises(FileNotFoundError):
            get_config()

    def test_empty_file_is_empty_dict(self, temp_config):
        temp_config("")
        assert get_config() == {}

    def test_nested_value(self, temp_config):
        temp_config("logging:\n  level: DEBUG\n")
        assert get_config_value("logging", "level") == "DEBUG"

    def test_missing_key_returns_default(self, temp_config):
        temp_config("logging:\n  level: DEBUG\n")
        assert get_config_value("logging", "handlers", default="none") == "none"
        assert get_config_value("nope", default=3) == 3

    def test_cached_until_reload(self, temp_config):
        path = temp_config("output:\n  format: json\n")
        assert get_config_value("output", "format") == "json"
        path.write_text("output:\n  format: markdown\n", encoding="utf-8")
        assert get_config_value("output", "format") == "json"
        get_config(reload=True)
        assert get_config_value("output", "format") == "markdown"


class TestDisciplineDefaults:
    def test_returns_copy(self, temp_config):
        temp_config("defaults:\n  hvac:\n    area: 500\n")
        first = get_discipline_defaults("hvac")
        first["area"] = 1
        assert get_discipline_defaults("hvac") == {"area": 500}

    def test_unknown_discipline_empty(self, temp_config):
        temp_config("defaults:\n  hvac:\n    area: 500\n")
        assert get_discipline_defaults("fire") == {}

    def test_non_mapping_section_empty(self, temp_config):
        temp_config("defaults:\n  hvac: 12\n")
        assert get_discipline_defaults("hvac") == {}


class TestNamedSettings:
    def test_log_level_upper_cased(self, temp_config):
        temp_config("logging:\n  level: debug\n")
        assert get_log_level_name() == "DEBUG"

    def test_log_level_default(self, temp_config):
        temp_config("output:\n  format: json\n")
        assert get_log_level_name() == "INFO"

    def test_output_format_lower_cased(self, temp_config):
        temp_config("output:\n  format: ' Markdown '\n")
        assert get_output_format_name() == "markdown"

    def test_output_format_default(self, temp_config):
        temp_config("logging:\n  level: INFO\n")
        assert get_output_format_name() == "human"
