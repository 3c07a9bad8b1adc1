"""Miner workers that assemble blocks from the pool and mine them."""

from __future__ import annotations

import queue
import random
import threading
import time
from typing import Callable

from .chain import Blockchain
from .logs import log_message
from .models import Block, BlockSubmission, Config
from .pool import TransactionPool
from .pow import proof_of_work


class Miner:
    """Takes a block's worth of transactions, mines it and submits it."""

    def __init__(
        self,
        miner_id: int,
        pool: TransactionPool,
        chain: Blockchain,
        config: Config,
        submissions: "queue.Queue[BlockSubmission]",
        log: Callable[[str], object] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.miner_id = miner_id
        self.pool = pool
        self.chain = chain
        self.config = config
        self.submissions = submissions
        self._log = log or log_message
        self._rng = rng or random.Random()

    def mine_once(self) -> BlockSubmission | None:
        """Try to mine one block; return the submission sent, or None."""
        wanted = self.config.transactions_per_block
        transactions = self.pool.take(wanted)
        if len(transactions) != wanted:
            self._log(
                f"Miner {self.miner_id}: Only {len(transactions)}/{wanted} "
                "transactions available - waiting"
            )
            return None

        self._log(f"Miner {self.miner_id}: Got full block of {len(transactions)} transactions")
        block = Block(
            id=-1,
            transactions=tuple(transactions),
            timestamp=int(time.time()),
            previous_hash=self.chain.last_block_hash(),
        )
        block.id = self.chain.next_block_id()

        result = proof_of_work(block)
        if result.error:
            self._log(
                f"Miner {self.miner_id}: Gave up after {result.elapsed_time:.2f} seconds "
                f"({result.operations} ops)"
            )
            return None

        submission = BlockSubmission(
            block=block,
            miner_id=self.miner_id,
            tx_ids=tuple(tx.id for tx in transactions),
        )
        self.submissions.put(submission)
        self._log(f"Miner {self.miner_id}: Sent block to validator")
        return submission

    def run(self, stop_event: threading.Event) -> int:
        """Mine until *stop_event* is set; return the number of blocks submitted."""
        self._log(f"miner number {self.miner_id}")
        submitted = 0
        while not stop_event.is_set():
            if self.mine_once() is not None:
                submitted += 1
            stop_event.wait(self._rng.randrange(10) + 5)
        self._log("Miner: Shutting down")
        return submitted