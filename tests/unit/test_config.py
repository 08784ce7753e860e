"""Tests for configuration parsing and validation"""
import pytest

from bodymind import config
from bodymind.exceptions import ConfigurationError


class TestParseCaps:
    """Test SUB_CATEGORY_DAILY_CAPS parsing"""

    def test_empty_uses_default(self):
        """Test every sub-category gets the default cap"""
        caps = config.parse_caps("", 100)
        assert caps == {
            "training": 100,
            "sleep": 100,
            "nutrition": 100,
            "meditation": 100,
            "reading": 100,
            "learning": 100,
        }

    def test_overrides(self):
        """Test listed sub-categories override the default"""
        caps = config.parse_caps(" Training=150, sleep=80 ,", 100)
        assert caps["training"] == 150
        assert caps["sleep"] == 80
        assert caps["reading"] == 100

    def test_unknown_sub_category(self):
        """Test unknown names are rejected"""
        with pytest.raises(ConfigurationError) as exc_info:
            config.parse_caps("yoga=50", 100)
        assert exc_info.value.config_key == "SUB_CATEGORY_DAILY_CAPS"

    def test_non_integer_value(self):
        """Test non-integer caps are rejected"""
        with pytest.raises(ConfigurationError):
            config.parse_caps("training=lots", 100)


class TestValidateConfig:
    """Test validate_config()"""

    def test_defaults_are_valid(self, monkeypatch):
        """Test the shipped defaults pass"""
        monkeypatch.setattr(config, "PILLAR_COMPLETION_THRESHOLD", 50)
        monkeypatch.setattr(config, "SUB_CATEGORY_DAILY_CAPS", config.parse_caps("", 100))
        monkeypatch.setattr(config, "DEFAULT_TIMEZONE", "UTC")
        config.validate_config()

    @pytest.mark.parametrize("threshold", [0, 101, -5])
    def test_threshold_out_of_range(self, monkeypatch, threshold):
        """Test threshold must be within 1-100"""
        monkeypatch.setattr(config, "PILLAR_COMPLETION_THRESHOLD", threshold)
        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_zero_cap(self, monkeypatch):
        """Test caps must be positive"""
        monkeypatch.setattr(config, "PILLAR_COMPLETION_THRESHOLD", 50)
        monkeypatch.setattr(config, "SUB_CATEGORY_DAILY_CAPS", config.parse_caps("reading=0", 100))
        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_unknown_timezone(self, monkeypatch):
        """Test default timezone must exist"""
        monkeypatch.setattr(config, "PILLAR_COMPLETION_THRESHOLD", 50)
        monkeypatch.setattr(config, "SUB_CATEGORY_DAILY_CAPS", config.parse_caps("", 100))
        monkeypatch.setattr(config, "DEFAULT_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ConfigurationError):
            config.validate_config()


class TestValidateCaps:
    """Test validate_caps()"""

    def test_valid_caps_returned(self):
        """Test valid caps pass through unchanged"""
        caps = config.parse_caps("training=150", 100)
        assert config.validate_caps(caps) is caps

    def test_missing_sub_category(self):
        """Test every sub-category needs a cap"""
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_caps({"training": 100})
        assert "sleep" in exc_info.value.message

    def test_negative_cap(self):
        """Test caps must be positive"""
        with pytest.raises(ConfigurationError):
            config.validate_caps(config.parse_caps("training=-1", 100))
