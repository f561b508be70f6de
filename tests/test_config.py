"""Tests for runtime configuration and initialization."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import psutil
import pytest

from settled import RuntimeConfig, get_config, init, is_initialized, reset
from settled._config import (
    MAX_WORKERS_ENV,
    _detect_container_cpu_limit,
    _detect_local_workers,
    _detect_max_workers,
)

pytestmark = pytest.mark.usefixtures('reset_config')


class TestRuntimeConfig:
    """Tests for the RuntimeConfig dataclass."""

    def test_default_values(self) -> None:
        config = RuntimeConfig()
        assert config.max_workers is None
        assert config.log_level is None

    def test_config_is_frozen(self) -> None:
        config = RuntimeConfig()
        with pytest.raises(AttributeError):
            config.max_workers = 8  # type: ignore[misc]


class TestInit:
    """Tests for init() / get_config() / reset()."""

    def test_get_config_before_init_raises(self) -> None:
        assert not is_initialized()
        with pytest.raises(RuntimeError, match='not initialized'):
            get_config()

    def test_init_explicit_workers(self) -> None:
        config = init(max_workers=6)
        assert config.max_workers == 6
        assert get_config() is config
        assert is_initialized()

    def test_init_clamps_workers(self) -> None:
        assert init(max_workers=0).max_workers == 1
        assert init(max_workers=10_000).max_workers == 256

    def test_init_detects_workers(self) -> None:
        with patch('settled._config._detect_max_workers', return_value=5):
            assert init().max_workers == 5

    def test_reset(self) -> None:
        init(max_workers=2)
        reset()
        assert not is_initialized()

    def test_init_with_log_level_configures_logging(self) -> None:
        with patch('settled._config.configure_logging') as configure:
            config = init(max_workers=2, log_level='DEBUG')
        configure.assert_called_once_with('DEBUG')
        assert config.log_level == 'DEBUG'

    def test_init_without_log_level_leaves_logging_alone(self) -> None:
        with patch('settled._config.configure_logging') as configure:
            init(max_workers=2)
        configure.assert_not_called()


class TestDetectMaxWorkers:
    """Tests for _detect_max_workers()."""

    def test_env_value(self) -> None:
        with patch.dict(os.environ, {MAX_WORKERS_ENV: '12'}):
            assert _detect_max_workers() == 12

    @pytest.mark.parametrize('value', ['0', '-3', '257', 'many'])
    def test_invalid_env_falls_back(self, value: str) -> None:
        with (
            patch.dict(os.environ, {MAX_WORKERS_ENV: value}),
            patch('settled._config._detect_local_workers', return_value=3),
        ):
            assert _detect_max_workers() == 3

    def test_invalid_env_warns_without_logging_configured(self, caplog: pytest.LogCaptureFixture) -> None:
        with (
            caplog.at_level(logging.WARNING),
            patch.dict(os.environ, {MAX_WORKERS_ENV: 'many'}),
            patch('settled._config._detect_local_workers', return_value=3),
        ):
            _detect_max_workers()
        assert any(MAX_WORKERS_ENV in r.getMessage() and 'many' in r.getMessage() for r in caplog.records)

    def test_no_env_uses_local_detection(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != MAX_WORKERS_ENV}
        with (
            patch.dict(os.environ, env, clear=True),
            patch('settled._config._detect_local_workers', return_value=7),
        ):
            assert _detect_max_workers() == 7


class TestDetectLocalWorkers:
    """Tests for _detect_local_workers()."""

    def test_within_bounds(self) -> None:
        assert 1 <= _detect_local_workers() <= 256

    def test_uses_physical_cores(self) -> None:
        with (
            patch.object(psutil, 'cpu_count', return_value=6),
            patch('settled._config._detect_container_cpu_limit', return_value=None),
        ):
            assert _detect_local_workers() == 6

    def test_container_limit_caps_cores(self) -> None:
        with (
            patch.object(psutil, 'cpu_count', return_value=16),
            patch('settled._config._detect_container_cpu_limit', return_value=2),
        ):
            assert _detect_local_workers() == 2

    def test_falls_back_to_logical_cores(self) -> None:
        def cpu_count(logical: bool = True) -> int | None:
            return 8 if logical else None

        with (
            patch.object(psutil, 'cpu_count', side_effect=cpu_count),
            patch('settled._config._detect_container_cpu_limit', return_value=None),
        ):
            assert _detect_local_workers() == 8

    def test_psutil_failure_uses_safe_default(self) -> None:
        with patch.object(psutil, 'cpu_count', side_effect=OSError('no /proc')):
            assert _detect_local_workers() == 4

    def test_container_limit_is_int_or_none(self) -> None:
        limit = _detect_container_cpu_limit()
        assert limit is None or limit >= 1
