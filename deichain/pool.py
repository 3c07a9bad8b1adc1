"""Shared pool of pending transactions."""

from __future__ import annotations

import os
import random
import threading
import time
from dataclasses import replace
from typing import Iterable

from .models import Transaction

_RAND_MAX = 2**31 - 1


class PoolFullError(Exception):
    """Raised when a transaction is added to a pool with no free slot."""


class TransactionPool:
    """Fixed number of slots holding transactions that await mining.

    All operations are thread safe. The pool can also be held as a context
    manager to run several operations under one lock.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"pool capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: list[Transaction | None] = [None] * capacity
        self._size = 0
        self._lock = threading.RLock()

    def __enter__(self) -> "TransactionPool":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()

    def __len__(self) -> int:
        with self._lock:
            return self._size

    def occupancy(self) -> float:
        """Return the fraction of slots in use, from 0.0 to 1.0."""
        with self._lock:
            return self._size / self.capacity

    def add(self, tx: Transaction) -> None:
        """Place *tx* in the first free slot or raise PoolFullError."""
        with self._lock:
            if self._size >= self.capacity:
                raise PoolFullError("transaction pool is full")
            for index, slot in enumerate(self._slots):
                if slot is None:
                    self._slots[index] = tx
                    self._size += 1
                    return
            raise PoolFullError("transaction pool is full")

    def take(self, count: int) -> list[Transaction]:
        """Return copies of up to *count* distinct transactions in slot order.

        Nothing is returned unless the pool holds at least *count*
        transactions. The transactions stay in the pool.
        """
        with self._lock:
            if self._size < count:
                return []
            collected: list[Transaction] = []
            seen: set[int] = set()
            for slot in self._slots:
                if len(collected) >= count:
                    break
                if slot is None or slot.id in seen:
                    continue
                seen.add(slot.id)
                collected.append(replace(slot))
            return collected

    def remove(self, ids: Iterable[int]) -> int:
        """Remove transactions whose id is in *ids* and age the ones left.

        Returns the number of transactions removed.
        """
        wanted = set(ids)
        removed = 0
        with self._lock:
            for index, slot in enumerate(self._slots):
                if slot is None:
                    continue
                if slot.id in wanted:
                    self._slots[index] = None
                    self._size -= 1
                    removed += 1
                else:
                    slot.age += 1
        return removed

    def reward(self, ids: Iterable[int]) -> int:
        """Return the summed value of pooled transactions whose id is in *ids*."""
        wanted = set(ids)
        with self._lock:
            return sum(slot.value for slot in self._slots if slot is not None and slot.id in wanted)

    def ages(self) -> list[int]:
        """Return the age of every pooled transaction, in slot order."""
        with self._lock:
            return [slot.age for slot in self._slots if slot is not None]


def create_transaction(
    counter: int,
    value: int,
    sender_id: int | None = None,
    rng: random.Random | None = None,
) -> Transaction:
    """Create a new transaction from *sender_id* (the process id by default)."""
    rng = rng or random.Random()
    sender = os.getpid() if sender_id is None else sender_id
    return Transaction(
        id=sender + counter,
        value=value,
        sender_id=sender,
        receiver_id=rng.randint(0, _RAND_MAX),
        quant=rng.randrange(10) + 1,
        timestamp=int(time.time()),
        age=0,
    )