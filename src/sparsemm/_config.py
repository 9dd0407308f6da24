"""
sparsemm Config - Execution Strategy Configuration

Controls how the multiplication kernel is executed (sequential or
column-partitioned across a thread pool) without changing function
signatures. Settings can be changed globally or overridden per thread
inside a ``config.local(...)`` block.

Worker count resolution (first match wins):
    1. explicit ``num_threads`` argument
    2. ``config.parallel.num_threads`` when > 0
    3. ``SPARSEMM_NUM_THREADS`` environment variable
    4. ``os.cpu_count()``
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional

from .core.dense import check_dimension
from .core.error import InvalidArgumentError

logger = logging.getLogger("sparsemm.config")

NUM_THREADS_ENV = "SPARSEMM_NUM_THREADS"


# =============================================================================
# Strategy Enumerations
# =============================================================================

class ParallelStrategy(IntEnum):
    """
    Strategy for executing the multiplication kernel.
    """
    AUTO = 0           # Parallel only when the work estimate justifies it
    SEQUENTIAL = 1     # Force sequential execution
    PARALLEL = 2       # Force the column-partitioned driver


class PartitionScheme(IntEnum):
    """
    How destination columns are split between workers.
    """
    CONTIGUOUS = 0     # Balanced contiguous blocks
    ROUND_ROBIN = 1    # Column j goes to worker j % n


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ParallelConfig:
    """Configuration for parallel execution."""
    strategy: ParallelStrategy = ParallelStrategy.AUTO
    num_threads: int = 0                  # 0 = environment decides
    min_products_per_thread: int = 50000  # AUTO threshold (multiply-adds)
    partition: PartitionScheme = PartitionScheme.CONTIGUOUS


# =============================================================================
# Global Configuration Manager
# =============================================================================

def _enum_name(value: Any) -> Any:
    """Enum member name; plain values (e.g. a scheme given by name) pass through."""
    return getattr(value, "name", value)


class SparseMMConfig:
    """
    Global configuration manager for sparsemm.

    Example:
        # Global configuration
        sparsemm.config.parallel.strategy = ParallelStrategy.SEQUENTIAL

        # Local configuration (context manager)
        with sparsemm.config.local(parallel=ParallelConfig(num_threads=4)):
            result = sparsemm.matmul(a, b)
        # Back to global config
    """

    def __init__(self):
        self._global_parallel = ParallelConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

        self._callbacks: Dict[str, List[Callable]] = {
            "parallel": [],
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def parallel(self) -> ParallelConfig:
        """Get parallel configuration."""
        if getattr(self._local, "parallel", None) is not None:
            return self._local.parallel
        return self._global_parallel

    @parallel.setter
    def parallel(self, value: ParallelConfig):
        """Set global parallel configuration."""
        self._global_parallel = value
        self._notify("parallel", value)

    @property
    def num_threads(self) -> int:
        """Configured number of threads (0 = environment decides)."""
        return self.parallel.num_threads

    @num_threads.setter
    def num_threads(self, value: int):
        self._global_parallel.num_threads = check_dimension("num_threads", value)
        self._notify("parallel", self._global_parallel)

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (currently ``parallel``)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._callbacks)
        if unknown:
            raise InvalidArgumentError(f"unknown config section(s): {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        """Clear thread-local configuration."""
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config section ("parallel")
            callback: Function called with the new value
        """
        if config_name in self._callbacks:
            self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        for callback in self._callbacks.get(config_name, []):
            try:
                callback(value)
            except Exception:
                logger.warning("config callback %r failed", callback, exc_info=True)

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults, dropping this thread's overrides."""
        self._global_parallel = ParallelConfig()
        self._clear_local(list(self._callbacks))

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "parallel": {
                "strategy": _enum_name(self.parallel.strategy),
                "num_threads": self.parallel.num_threads,
                "min_products_per_thread": self.parallel.min_products_per_thread,
                "partition": _enum_name(self.parallel.partition),
            },
        }

    def __repr__(self) -> str:
        return f"SparseMMConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SparseMMConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())

    def __enter__(self):
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._clear_local(self._keys)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = SparseMMConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> SparseMMConfig:
    """Get the global configuration instance."""
    return config


def set_parallel(
    num_threads: int = 0,
    strategy: ParallelStrategy = ParallelStrategy.AUTO,
    partition: PartitionScheme = PartitionScheme.CONTIGUOUS,
    min_products_per_thread: Optional[int] = None,
):
    """
    Configure parallel execution.

    Args:
        num_threads: Number of threads (0 = environment decides)
        strategy: Parallel strategy
        partition: Column partition scheme
        min_products_per_thread: AUTO threshold; default keeps the built-in value
    """
    num_threads = check_dimension("num_threads", num_threads)
    new = ParallelConfig(strategy=strategy, num_threads=num_threads, partition=partition)
    if min_products_per_thread is not None:
        new.min_products_per_thread = min_products_per_thread
    config.parallel = new


def _env_num_threads() -> Optional[int]:
    """Read SPARSEMM_NUM_THREADS, ignoring (and logging) invalid values."""
    raw = os.environ.get(NUM_THREADS_ENV, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer", NUM_THREADS_ENV, raw)
        return None
    if value <= 0:
        logger.warning("ignoring %s=%r: must be positive", NUM_THREADS_ENV, raw)
        return None
    return value


def resolve_num_threads(num_threads: Optional[int] = None) -> int:
    """
    Resolve the worker count for one call.

    Args:
        num_threads: Explicit request; None or 0 defers to configuration

    Returns:
        Positive worker count

    Raises:
        InvalidArgumentError: If ``num_threads`` is not a non-negative integer
    """
    if num_threads is not None:
        num_threads = check_dimension("num_threads", num_threads)
        if num_threads > 0:
            return num_threads

    configured = config.parallel.num_threads
    if configured > 0:
        return configured

    from_env = _env_num_threads()
    if from_env is not None:
        logger.debug("using %s=%d", NUM_THREADS_ENV, from_env)
        return from_env

    return os.cpu_count() or 1


__all__ = [
    "ParallelStrategy",
    "PartitionScheme",
    "ParallelConfig",
    "SparseMMConfig",
    "config",
    "get_config",
    "set_parallel",
    "resolve_num_threads",
    "NUM_THREADS_ENV",
]
