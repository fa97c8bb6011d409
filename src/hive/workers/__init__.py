"""
Workers available for delegation.

Registration is explicit: :func:`build_registry` calls the ``register_*`` function of every known
worker type and freezes the result.  Importing this package registers nothing.
"""

import logging
from typing import (
    Any,
    Callable,
    Sequence,
)

from hive.workers.coder import register_coder
from hive.workers.file_manager import register_file_manager
from hive.workers.registry import (
    WorkerFactory,
    WorkerRegistry,
)
from hive.workers.shell import register_shell

__all__ = [
    "DEFAULT_REGISTRATIONS",
    "WorkerFactory",
    "WorkerRegistry",
    "build_registry",
]

logger = logging.getLogger(__name__)

DEFAULT_REGISTRATIONS: Sequence[Callable[..., None]] = (
    register_file_manager,
    register_shell,
    register_coder,
)


def build_registry(
    registrations: Sequence[Callable[[WorkerRegistry], Any]] = DEFAULT_REGISTRATIONS,
) -> WorkerRegistry:
    """Run every registration function against a new registry and freeze it."""
    registry = WorkerRegistry()
    for register in registrations:
        register(registry)
    registry.freeze()
    logger.info("Worker registry ready: %s", sorted(registry.all_roles()))
    return registry
