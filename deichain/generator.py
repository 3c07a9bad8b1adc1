"""Periodic creation of transactions into the pool."""

from __future__ import annotations

import random
import threading
from typing import Callable

from .logs import log_message
from .models import Transaction
from .pool import PoolFullError, TransactionPool, create_transaction


class TransactionGenerator:
    """Adds transactions of a fixed value to the pool at a fixed interval."""

    def __init__(
        self,
        pool: TransactionPool,
        value: int,
        interval_ms: int,
        sender_id: int | None = None,
        log: Callable[[str], object] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.pool = pool
        self.value = value
        self.interval_ms = interval_ms
        self.sender_id = sender_id
        self._log = log or log_message
        self._rng = rng or random.Random()
        self.counter = 0

    def step(self) -> Transaction | None:
        """Try to add one transaction; return it, or None when the pool is full."""
        tx = create_transaction(self.counter, self.value, self.sender_id, self._rng)
        try:
            self.pool.add(tx)
        except PoolFullError:
            self._log("Generator: Transaction pool is full")
            return None
        self._log(f"Generator: Added TX ID {tx.id} (Value: {self.value}) to pool")
        self.counter += 1
        return tx

    def run(self, stop_event: threading.Event) -> int:
        """Generate until *stop_event* is set; return the number of transactions added."""
        added = 0
        while not stop_event.is_set():
            if self.step() is not None:
                added += 1
            stop_event.wait(self.interval_ms / 1000)
        self._log("Generator: Shutting down")
        return added