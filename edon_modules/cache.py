"""Process-lifetime content cache for loaded modules."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .models import Module

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Writers are preferred: once a writer is waiting, new readers queue behind
    it so a steady stream of lookups cannot starve a put.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ContentCache:
    """Maps an exact specifier string to its loaded Module.

    Entries are never evicted. Keys are compared byte-for-byte; no
    normalization happens here.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._modules: dict[str, Module] = {}

    def get(self, specifier: str) -> Module | None:
        """Return the cached Module or None. Never performs I/O."""
        with self._lock.read():
            return self._modules.get(specifier)

    def put(self, specifier: str, module: Module) -> None:
        """Store a Module. A second put for the same key silently replaces it."""
        with self._lock.write():
            if specifier in self._modules:
                logger.debug(f"Replacing cached module: {specifier}")
            self._modules[specifier] = module

    def specifiers(self) -> list[str]:
        with self._lock.read():
            return list(self._modules)

    def clear(self) -> None:
        """Drop every entry (teardown only, not an invalidation policy)."""
        with self._lock.write():
            self._modules.clear()

    def __contains__(self, specifier: object) -> bool:
        with self._lock.read():
            return specifier in self._modules

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._modules)
