"""
Pipeline configuration: worker pool sizes and the optional drain deadline.
"""

import os
from dataclasses import dataclass
from typing import Optional

from wordindex.common.errors import ConfigurationError

DEFAULT_MAP_WORKERS = 4
DEFAULT_REDUCE_WORKERS = 2


def validate_worker_count(value, name: str = 'num_workers') -> int:
    """Return value if it is a positive int, else raise ConfigurationError"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class PipelineConfig:
    """Settings for a single pipeline run"""
    map_workers: int = DEFAULT_MAP_WORKERS
    reduce_workers: int = DEFAULT_REDUCE_WORKERS
    drain_timeout: Optional[float] = None

    def validate(self) -> 'PipelineConfig':
        """
        Check every field

        Returns:
            self, so calls can be chained

        Raises:
            ConfigurationError: On a non-positive worker count or timeout
        """
        validate_worker_count(self.map_workers, 'map_workers')
        validate_worker_count(self.reduce_workers, 'reduce_workers')
        if self.drain_timeout is not None:
            if isinstance(self.drain_timeout, bool) or not isinstance(self.drain_timeout, (int, float)):
                raise ConfigurationError(f"drain_timeout must be a number, got {self.drain_timeout!r}")
            if self.drain_timeout <= 0:
                raise ConfigurationError(f"drain_timeout must be positive, got {self.drain_timeout}")
        return self

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Build a config from WORDINDEX_* environment variables"""
        return cls(
            map_workers=_env_int('WORDINDEX_MAP_WORKERS', DEFAULT_MAP_WORKERS),
            reduce_workers=_env_int('WORDINDEX_REDUCE_WORKERS', DEFAULT_REDUCE_WORKERS),
            drain_timeout=_env_float('WORDINDEX_DRAIN_TIMEOUT'),
        ).validate()
