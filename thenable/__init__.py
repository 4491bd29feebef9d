"""
thenable - Promises/A+ futures for Python

Supports:
- Futures settled exactly once, with deferred continuation dispatch
- Adoption of nested futures and foreign thenables
- all / race / all_settled combinators
- Pluggable callback queues (in-process FIFO or asyncio)
"""

__version__ = "0.1.0"

from typing import Any, Optional

from .config import (
    QueueBackend,
    ThenableConfig,
    get_config,
    get_default_config,
    load_config_from_env,
    load_config_from_file,
    merge_configs,
    set_config,
    validate_config,
)
from .exceptions import (
    ThenableError,
    CyclicResolutionError,
    NotIterableError,
    Rejection,
    QueueOverflowError,
    ConfigurationError,
)
from .scheduler import (
    CallbackQueue,
    DeferredQueue,
    AsyncioQueue,
    create_queue,
    get_default_queue,
    set_default_queue,
)
from .core import (
    AbstractFuture,
    Deferred,
    FulfilledOutcome,
    Future,
    FutureStatus,
    RejectedOutcome,
    SettledOutcome,
)
from .interop import from_asyncio, to_asyncio
from .utils.logging import configure_logging


def configure(config: Optional[ThenableConfig] = None) -> ThenableConfig:
    """
    Apply a configuration to the process

    Validates it, configures logging and installs a fresh default queue of
    the configured backend.

    Args:
        config: Configuration to apply, loaded from the environment if None

    Returns:
        The applied configuration

    Raises:
        ConfigurationError: The configuration has validation issues
    """
    config = config or load_config_from_env()
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("Invalid configuration", {"issues": issues})

    set_config(config)
    configure_logging(
        level="DEBUG" if config.debug else config.log_level,
        format_string=config.log_format,
    )

    if config.queue_backend is QueueBackend.ASYNCIO:
        set_default_queue(create_queue(config.queue_backend))
    else:
        set_default_queue(
            create_queue(config.queue_backend, max_callbacks=config.max_drain_callbacks)
        )
    return config


def resolved(value: Any = None, **kwargs: Any) -> Future:
    """Future.resolve as a function"""
    return Future.resolve(value, **kwargs)


def rejected(reason: Any = None, **kwargs: Any) -> Future:
    """Future.reject as a function"""
    return Future.reject(reason, **kwargs)


def deferred(**kwargs: Any) -> Deferred:
    """Future.deferred as a function"""
    return Future.deferred(**kwargs)


def all_of(inputs: Any, **kwargs: Any) -> Future:
    """Future.all as a function"""
    return Future.all(inputs, **kwargs)


def race(inputs: Any, **kwargs: Any) -> Future:
    """Future.race as a function"""
    return Future.race(inputs, **kwargs)


def all_settled(inputs: Any, **kwargs: Any) -> Future:
    """Future.all_settled as a function"""
    return Future.all_settled(inputs, **kwargs)


__all__ = [
    "__version__",
    # Configuration
    "QueueBackend",
    "ThenableConfig",
    "configure",
    "get_config",
    "get_default_config",
    "load_config_from_env",
    "load_config_from_file",
    "merge_configs",
    "set_config",
    "validate_config",
    # Errors
    "ThenableError",
    "CyclicResolutionError",
    "NotIterableError",
    "Rejection",
    "QueueOverflowError",
    "ConfigurationError",
    # Queues
    "CallbackQueue",
    "DeferredQueue",
    "AsyncioQueue",
    "create_queue",
    "get_default_queue",
    "set_default_queue",
    # Futures
    "AbstractFuture",
    "Deferred",
    "FulfilledOutcome",
    "Future",
    "FutureStatus",
    "RejectedOutcome",
    "SettledOutcome",
    "resolved",
    "rejected",
    "deferred",
    "all_of",
    "race",
    "all_settled",
    # asyncio
    "to_asyncio",
    "from_asyncio",
]
