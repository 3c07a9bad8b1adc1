"""Per-miner statistics fed by validation messages."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .models import MAX_MINERS

_POLL_SECONDS = 0.1


class MessageType(Enum):
    VALID_BLOCK = "valid"
    INVALID_BLOCK = "invalid"


@dataclass(frozen=True)
class StatsMessage:
    """Result of validating one submitted block."""

    msg_type: MessageType
    miner_id: int
    credits_earned: int = 0
    verification_time: float = 0.0


class Statistics:
    """Running totals of validated blocks, per miner and overall."""

    def __init__(self, max_miners: int = MAX_MINERS) -> None:
        self.max_miners = max_miners
        self.valid_blocks = [0] * max_miners
        self.invalid_blocks = [0] * max_miners
        self.total_credits = [0] * max_miners
        self.total_verification_time = 0.0
        self.verification_count = 0
        self.total_blocks_validated = 0
        self._lock = threading.Lock()

    def record(self, message: StatsMessage) -> str:
        """Add *message* to the totals and return a line describing it."""
        miner = message.miner_id
        if not 0 <= miner < self.max_miners:
            raise ValueError(f"miner id {miner} out of range 0..{self.max_miners - 1}")
        with self._lock:
            self.total_blocks_validated += 1
            if message.msg_type is MessageType.VALID_BLOCK:
                self.valid_blocks[miner] += 1
                self.total_credits[miner] += message.credits_earned
                self.total_verification_time += message.verification_time
                self.verification_count += 1
                return (
                    f"Statistics: Miner {miner} earned {message.credits_earned} "
                    "credits for valid block"
                )
            self.invalid_blocks[miner] += 1
            return f"Statistics: Miner {miner} submitted invalid block"

    def average_verification_time(self) -> float | None:
        """Return the mean verification time of valid blocks, or None if there are none."""
        with self._lock:
            if self.verification_count == 0:
                return None
            return self.total_verification_time / self.verification_count

    def report(self, chain_size: int, pending_transactions: int) -> list[str]:
        """Return the statistics report as a list of lines."""
        average = self.average_verification_time()
        with self._lock:
            lines = [
                "=== Blockchain Statistics ===",
                f"Total blocks in blockchain: {chain_size}",
                f"Pending transactions: {pending_transactions}",
                f"Total blocks validated: {self.total_blocks_validated}",
                "Miner Statistics:",
                f"{'Miner ID':<10} {'Valid Blocks':<15} {'Invalid Blocks':<15} {'Total Credits':<15}",
            ]
            for miner, (valid, invalid, credits) in enumerate(
                zip(self.valid_blocks, self.invalid_blocks, self.total_credits)
            ):
                if valid > 0 or invalid > 0:
                    lines.append(f"{miner:<10} {valid:<15} {invalid:<15} {credits:<15}")
        if average is not None:
            lines.append(f"Average verification time: {average:.2f} seconds")
        lines.append("============================")
        return lines

    def consume(
        self,
        messages: "queue.Queue[StatsMessage]",
        stop_event: threading.Event,
        log: Callable[[str], object] | None = None,
    ) -> int:
        """Record messages from *messages* until *stop_event* is set.

        Each message is marked done on the queue once recorded. Returns the
        number of messages recorded.
        """
        handled = 0
        while not stop_event.is_set():
            try:
                message = messages.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
            try:
                line = self.record(message)
            finally:
                messages.task_done()
            handled += 1
            if log is not None:
                log(line)
        return handled