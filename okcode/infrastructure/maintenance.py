# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Background pruning of expired sessions and revoked-token entries."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Protocol

from okcode.shared.errors import StoreUnavailableError
from okcode.shared.logging import logger


class _Purgeable(Protocol):
    def purge_expired(self) -> int: ...


class ExpiredEntryPruner:
    def __init__(self, stores: Sequence[_Purgeable], *, interval: float) -> None:
        self._stores = list(stores)
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        removed = 0
        for store in self._stores:
            try:
                removed += store.purge_expired()
            except StoreUnavailableError:
                logger.warning(f"maintenance: purge failed for {type(store).__name__}")
        if removed:
            logger.info(f"maintenance: purged {removed} expired entries")
        return removed

    def _loop(self) -> None:
        logger.info(f"maintenance: pruner started (interval={self._interval:.0f}s)")
        while not self._stop.wait(self._interval):
            self.run_once()
        logger.info("maintenance: pruner stopped")

    def start(self) -> None:
        if self.running or not self._stores:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="okcode-pruner", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None


__all__ = ["ExpiredEntryPruner"]
