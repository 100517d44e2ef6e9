"""Tests for engine_config.yaml loading and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from src.cycle_engine.config_loader import (
    ConfigValidationError,
    EngineConfig,
    _validate_and_build,
    get_engine_config,
    load_engine_config,
    reload_engine_config,
)


class TestConfigLoading:
    """Tests for loading the bundled engine_config.yaml."""

    def test_load_default_config(self, engine_config: EngineConfig) -> None:
        assert engine_config.version == "1.0"
        assert engine_config.cycle_defaults.cycle_length == 28
        assert engine_config.cycle_defaults.period_length == 5

    def test_phase_boundaries(self, engine_config: EngineConfig) -> None:
        boundaries = engine_config.phase_boundaries
        assert boundaries.policy == "fixed"
        assert boundaries.follicular_end_day == 13
        assert boundaries.ovulatory_end_day == 17
        assert boundaries.ovulatory_days == 4

    def test_prediction_settings(self, engine_config: EngineConfig) -> None:
        assert engine_config.predictions.likelihood_threshold_pct == pytest.approx(30.0)
        assert engine_config.predictions.most_common_limit == 5

    def test_period_history_and_fertility(self, engine_config: EngineConfig) -> None:
        assert engine_config.period_history.max_period_days == 14
        assert engine_config.period_history.regular_cycle_min_days == 21
        assert engine_config.period_history.regular_cycle_max_days == 35
        assert engine_config.fertility.luteal_phase_days == 14

    def test_singleton_is_cached(self) -> None:
        assert get_engine_config() is get_engine_config()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_engine_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("phase_boundaries: [unclosed\n")
        with pytest.raises(ConfigValidationError):
            load_engine_config(path)


class TestConfigValidation:
    def test_empty_config_uses_defaults(self) -> None:
        config = _validate_and_build({})
        assert config.phase_boundaries.follicular_end_day == 13
        assert config.predictions.likelihood_threshold_pct == pytest.approx(30.0)

    def test_unsupported_policy(self) -> None:
        with pytest.raises(ConfigValidationError, match="policy"):
            _validate_and_build({"phase_boundaries": {"policy": "scaled"}})

    def test_ovulatory_end_before_follicular_end(self) -> None:
        with pytest.raises(ConfigValidationError, match="ovulatory_end_day"):
            _validate_and_build(
                {"phase_boundaries": {"follicular_end_day": 15, "ovulatory_end_day": 14}}
            )

    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(ConfigValidationError, match="likelihood_threshold_pct"):
            _validate_and_build({"predictions": {"likelihood_threshold_pct": 150}})

    def test_non_integer_value(self) -> None:
        with pytest.raises(ConfigValidationError, match="must be an integer"):
            _validate_and_build({"cycle_defaults": {"cycle_length": "long"}})

    def test_reports_every_error(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _validate_and_build(
                {
                    "cycle_defaults": {"cycle_length": 10, "period_length": 12},
                    "predictions": {"likelihood_threshold_pct": -1},
                }
            )
        assert "3 validation error(s)" in str(exc_info.value)


class TestReload:
    def test_reload_from_custom_path(self, tmp_path: Path) -> None:
        path = tmp_path / "engine_config.yaml"
        path.write_text(
            textwrap.dedent(
                """\
                version: "2.0"
                predictions:
                  likelihood_threshold_pct: 50
                """
            )
        )
        try:
            config = reload_engine_config(path)
            assert config.version == "2.0"
            assert get_engine_config() is config
            assert config.predictions.likelihood_threshold_pct == pytest.approx(50.0)
        finally:
            reload_engine_config()

    def test_failed_reload_keeps_old_config(self, tmp_path: Path) -> None:
        before = get_engine_config()
        path = tmp_path / "bad.yaml"
        path.write_text("phase_boundaries:\n  policy: scaled\n")
        with pytest.raises(ConfigValidationError):
            reload_engine_config(path)
        assert get_engine_config() is before
