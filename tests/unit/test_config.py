"""Tests for mapsketch.config module."""

import pytest
from pydantic import ValidationError

from mapsketch.config import Settings
from mapsketch.store.features import CapacityLimits


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default values are set correctly."""
        for name in ("MAX_POLYGONS", "MAX_RECTANGLES", "MAX_CIRCLES", "MAX_LINESTRINGS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        # Capacity limits
        assert settings.MAX_POLYGONS == 10
        assert settings.MAX_RECTANGLES == 5
        assert settings.MAX_CIRCLES == 5
        assert settings.MAX_LINESTRINGS == 20

        # Geometry
        assert settings.MIN_TRIM_AREA == 0.0001
        assert settings.CIRCLE_STEPS == 64

        # Export
        assert settings.EXPORT_INDENT == 2

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MAX_CIRCLES", "2")
        monkeypatch.setenv("MIN_TRIM_AREA", "0.5")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.MAX_CIRCLES == 2
        assert settings.MIN_TRIM_AREA == 0.5

    def test_non_positive_limit_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a zero limit fails at settings load."""
        monkeypatch.setenv("MAX_POLYGONS", "0")
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None,  # type: ignore[call-arg]
            )

    @pytest.mark.parametrize("steps", ["1", "2"])
    def test_too_few_circle_steps_rejected(
        self, monkeypatch: pytest.MonkeyPatch, steps: str
    ) -> None:
        """Test a circle needs at least three vertices."""
        monkeypatch.setenv("CIRCLE_STEPS", steps)
        with pytest.raises(ValidationError, match="CIRCLE_STEPS"):
            Settings(
                _env_file=None,  # type: ignore[call-arg]
            )

    def test_log_level_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that LOG_LEVEL defaults to INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.LOG_LEVEL == "INFO"

    def test_log_format_options(self) -> None:
        """Test that LOG_FORMAT accepts valid options."""
        settings = Settings(
            LOG_FORMAT="json",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.LOG_FORMAT == "json"

    def test_test_settings_fixture(self, test_settings: Settings) -> None:
        """Test that settings can be created with custom values."""
        assert test_settings.LOG_LEVEL == "DEBUG"


class TestCapacityLimitsFromSettings:
    """Tests for Settings.capacity_limits()."""

    def test_builds_limits(self) -> None:
        """Test the MAX_* values are carried over."""
        settings = Settings(
            MAX_POLYGONS=3,
            MAX_RECTANGLES=2,
            MAX_CIRCLES=1,
            MAX_LINESTRINGS=4,
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.capacity_limits() == CapacityLimits(
            polygon=3, rectangle=2, circle=1, linestring=4
        )
