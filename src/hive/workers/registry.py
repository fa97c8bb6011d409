"""Registry mapping worker roles to worker instances."""

import logging
from typing import (
    Callable,
    Dict,
    List,
    Optional,
    Set,
)

from hive.agent.base import Worker

logger = logging.getLogger(__name__)

WorkerFactory = Callable[[], Worker]
"""Zero-argument constructor producing a worker."""


class WorkerRegistry:
    """
    Role -> worker lookup used by the delegation bridge.

    Filled once at start-up with :meth:`register`, then sealed with :meth:`freeze`.  Workers are
    constructed when registered, so lookups never build anything and the registry can be shared
    across loops without locking.
    """

    def __init__(self) -> None:
        self._workers: Dict[str, Worker] = {}
        self._frozen = False

    def __len__(self) -> int:
        return len(self._workers)

    def __contains__(self, role: object) -> bool:
        return role in self._workers

    @property
    def frozen(self) -> bool:
        """True once registration is over."""
        return self._frozen

    def register(self, role: str, factory: WorkerFactory) -> Worker:
        """
        Build a worker with *factory* and make it available under *role*.

        Raises
        ------
        RuntimeError
            If the registry has been frozen.
        ValueError
            If *role* is already taken or the worker reports a different role.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register worker '{role}': registry is frozen.")
        if role in self._workers:
            raise ValueError(f"Worker '{role}' is already registered.")

        worker = factory()
        if worker.role != role:
            raise ValueError(f"Factory for '{role}' produced a worker with role '{worker.role}'.")

        self._workers[role] = worker
        logger.debug("Registered worker '%s' (%s @ %s)", role, worker.model, worker.endpoint)
        return worker

    def freeze(self) -> None:
        """Seal the registry; later registrations fail."""
        self._frozen = True

    def get(self, role: str) -> Optional[Worker]:
        """Worker registered under *role*, or ``None``."""
        return self._workers.get(role)

    def all_roles(self) -> Set[str]:
        """Every registered role."""
        return set(self._workers)

    def workers(self) -> List[Worker]:
        """Registered workers ordered by role."""
        return [self._workers[role] for role in sorted(self._workers)]
