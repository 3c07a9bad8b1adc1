"""Validation of mined blocks submitted by miners."""

from __future__ import annotations

import queue
import threading
import time
from typing import Callable

from .chain import Blockchain
from .logs import log_message
from .models import BlockSubmission, Config
from .pool import TransactionPool
from .stats import MessageType, StatsMessage

VALIDATION_PAUSE = 3.0
_POLL_SECONDS = 0.1


class Validator:
    """Checks submitted blocks, appends valid ones and reports to statistics."""

    def __init__(
        self,
        chain: Blockchain,
        pool: TransactionPool,
        config: Config,
        stats_queue: "queue.Queue[StatsMessage] | None" = None,
        log: Callable[[str], object] | None = None,
        on_chain_full: Callable[[], object] | None = None,
    ) -> None:
        self.chain = chain
        self.pool = pool
        self.config = config
        self.stats_queue = stats_queue
        self._log = log or log_message
        self._on_chain_full = on_chain_full

    def _report(self, message: StatsMessage) -> None:
        if self.stats_queue is not None:
            self.stats_queue.put(message)

    def validate(self, submission: BlockSubmission) -> bool:
        """Validate *submission*; return True when its block id follows the chain."""
        block = submission.block
        self._log(
            f"Validator: Received block from miner {submission.miner_id} (PoW: {block.nonce})"
        )
        ids = submission.tx_ids[: self.config.transactions_per_block]

        valid = len(self.chain) == block.id
        if not valid:
            self._log("Validator: Block INVALID")
            self._report(StatsMessage(MessageType.INVALID_BLOCK, submission.miner_id))
            return False

        self._log("Validator: Block VALID")
        with self.chain:
            if self.chain.is_full():
                self._log("Validator: Blockchain is full, cannot add block")
                if self._on_chain_full is not None:
                    self._on_chain_full()
            else:
                self.chain.append(block)
                reward = self.pool.reward(ids)
                self._log(f"reward {reward} from {len(ids)} transactions ")
                self._report(
                    StatsMessage(
                        MessageType.VALID_BLOCK,
                        submission.miner_id,
                        credits_earned=reward,
                        verification_time=time.time() - block.timestamp,
                    )
                )

        self._log("ADDED TO CHAIN , NOW DELETING FROM POOL")
        removed = self.pool.remove(ids)
        self._log(
            f"Removed {removed}/{len(ids)} transactions (pool size now: {len(self.pool)})"
        )
        return True

    def run(
        self,
        submissions: "queue.Queue[BlockSubmission]",
        stop_event: threading.Event,
        pause: float = VALIDATION_PAUSE,
    ) -> int:
        """Validate submissions until *stop_event* is set; return how many were handled."""
        self._log("Validator: Starting validator process")
        handled = 0
        while not stop_event.is_set():
            try:
                submission = submissions.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
            try:
                self.validate(submission)
            finally:
                submissions.task_done()
            handled += 1
            stop_event.wait(pause)
        self._log("Validator: Shutting down")
        return handled