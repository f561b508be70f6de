"""Runtime configuration: RuntimeConfig, init() and worker sizing."""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass

import msgspec
import psutil

from settled._logging import configure_logging
from settled.types import WorkerLimit

__all__ = [
    'RuntimeConfig',
    'get_config',
    'init',
    'is_initialized',
    'reset',
]

MAX_WORKERS_ENV = 'SETTLED_MAX_WORKERS'


@dataclass(frozen=True)
class RuntimeConfig:
    """Configuration for settled.

    Attributes:
        max_workers: Worker threads available to capture_sync. None leaves
            the event loop's default thread limiter untouched.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
    """

    max_workers: int | None = None
    log_level: str | None = None


# Global configuration (set by init())
_config: RuntimeConfig | None = None


def _clamp(value: int) -> int:
    return max(1, min(256, value))


def _detect_max_workers() -> int:
    """Detect the worker count.

    Priority:
    1. SETTLED_MAX_WORKERS environment variable
    2. Physical CPU cores, bounded by any container CPU limit
    """
    env_value = os.environ.get(MAX_WORKERS_ENV)
    if env_value:
        try:
            return msgspec.convert(env_value, WorkerLimit, strict=False)
        except msgspec.ValidationError as e:
            logging.warning("Invalid %s value '%s' (%s), detecting workers instead", MAX_WORKERS_ENV, env_value, e)

    return _detect_local_workers()


def _detect_local_workers() -> int:
    """Detect worker count from local system resources."""
    try:
        cores = psutil.cpu_count(logical=False)
        if cores is None:
            cores = psutil.cpu_count(logical=True) or 4

        container_limit = _detect_container_cpu_limit()
        if container_limit is not None:
            cores = min(cores, container_limit)

        return _clamp(cores)
    except Exception:
        return 4  # Safe default


def _detect_container_cpu_limit() -> int | None:
    """Detect CPU limit in containerized environments."""
    # cgroups v2
    try:
        with pathlib.Path('/sys/fs/cgroup/cpu.max').open() as f:
            content = f.read().strip()
            if content != 'max':
                quota, period = content.split()
                if quota != 'max':
                    return max(1, int(int(quota) / int(period)))
    except (FileNotFoundError, ValueError, PermissionError):
        pass

    # cgroups v1
    try:
        with pathlib.Path('/sys/fs/cgroup/cpu/cpu.cfs_quota_us').open() as quota_f:
            quota_v1 = int(quota_f.read().strip())
        with pathlib.Path('/sys/fs/cgroup/cpu/cpu.cfs_period_us').open() as period_f:
            period_v1 = int(period_f.read().strip())
        if quota_v1 > 0:
            return max(1, quota_v1 // period_v1)
    except (FileNotFoundError, ValueError, PermissionError):
        pass

    return None


def init(
    max_workers: int | None = None,
    log_level: str | None = None,
) -> RuntimeConfig:
    """Initialize settled with the given configuration.

    Calling init() is optional: without it capture_sync uses the event
    loop's default thread limiter and nothing is logged.

    Args:
        max_workers: Worker threads for capture_sync. Auto-detected if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.

    Returns:
        The RuntimeConfig that was set.

    Example:
        ```python
        import settled

        settled.init(max_workers=8, log_level='DEBUG')
        ```
    """
    global _config  # noqa: PLW0603

    resolved_workers = _detect_max_workers() if max_workers is None else _clamp(max_workers)

    _config = RuntimeConfig(max_workers=resolved_workers, log_level=log_level)

    if log_level is not None:
        configure_logging(log_level)

    return _config


def get_config() -> RuntimeConfig:
    """Get the current configuration.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'settled not initialized. Call settled.init() first.'
        raise RuntimeError(msg)
    return _config


def is_initialized() -> bool:
    """Return True once init() has been called."""
    return _config is not None


def reset() -> None:
    """Forget the current configuration."""
    global _config  # noqa: PLW0603
    _config = None
