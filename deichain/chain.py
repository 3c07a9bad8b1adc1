"""The blockchain: an append-only list of mined blocks with a fixed capacity."""

from __future__ import annotations

import random
import threading

from .models import Block
from .pow import INITIAL_HASH, compute_sha256, generate_random_block


class ChainFullError(Exception):
    """Raised when a block is appended to a chain that has reached capacity."""


class Blockchain:
    """Thread-safe chain of blocks.

    The chain can be held as a context manager to check and append under
    one lock.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"blockchain capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self._blocks: list[Block] = []
        self._lock = threading.RLock()

    @classmethod
    def with_genesis(
        cls,
        capacity: int,
        transactions_per_block: int,
        rng: random.Random | None = None,
    ) -> "Blockchain":
        """Create a chain holding a freshly mined genesis block."""
        chain = cls(capacity)
        chain.append(generate_random_block(INITIAL_HASH, 0, transactions_per_block, rng))
        return chain

    def __enter__(self) -> "Blockchain":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    def is_full(self) -> bool:
        with self._lock:
            return len(self._blocks) >= self.capacity

    def append(self, block: Block) -> None:
        """Add *block* at the end or raise ChainFullError."""
        with self._lock:
            if len(self._blocks) >= self.capacity:
                raise ChainFullError("blockchain is full")
            self._blocks.append(block)

    def last_block_hash(self) -> str:
        """Return the hex hash of the last block."""
        with self._lock:
            if not self._blocks:
                raise IndexError("blockchain is empty")
            return compute_sha256(self._blocks[-1])

    def next_block_id(self) -> int:
        """Return the id the next block should carry; 0 for an empty chain."""
        with self._lock:
            if not self._blocks:
                return 0
            return self._blocks[-1].id + 1

    def blocks(self) -> tuple[Block, ...]:
        """Return a snapshot of the blocks in order."""
        with self._lock:
            return tuple(self._blocks)