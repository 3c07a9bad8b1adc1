"""Core data records and configuration loading."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

MAX_MINERS = 100
MAX_SUBMISSION_TXS = 15
HASH_SIZE = 65

_CONFIG_FIELDS = 4
_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass(frozen=True)
class Config:
    """Simulation parameters read from the configuration file."""

    num_miners: int
    pool_size: int
    transactions_per_block: int
    blockchain_blocks: int

    def __str__(self) -> str:
        return (
            f"Configuration loaded: Miners={self.num_miners}, "
            f"Pool={self.pool_size}, Tx/Block={self.transactions_per_block}, "
            f"Blocks={self.blockchain_blocks}"
        )


@dataclass
class Transaction:
    """A single transfer waiting in, or taken from, the transaction pool."""

    id: int
    value: int
    sender_id: int = 0
    receiver_id: int = 0
    quant: int = 0
    timestamp: int = 0
    age: int = 0


@dataclass
class Block:
    """A block of transactions; the nonce is filled in by proof of work."""

    id: int
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    timestamp: int = 0
    nonce: int = 0
    previous_hash: str = ""

    def __post_init__(self) -> None:
        self.transactions = tuple(self.transactions)


@dataclass(frozen=True)
class BlockSubmission:
    """A mined block sent by a miner to the validator."""

    block: Block
    miner_id: int
    tx_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        ids = tuple(self.tx_ids)
        if len(ids) > MAX_SUBMISSION_TXS:
            raise ValueError(
                f"a submission holds at most {MAX_SUBMISSION_TXS} transaction ids, got {len(ids)}"
            )
        object.__setattr__(self, "tx_ids", ids)


def read_config(path) -> Config:
    """Read four whitespace-separated integers from *path*.

    The order is: miners, pool size, transactions per block, blockchain blocks.
    Anything after the fourth integer is ignored.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot open configuration file {path}: {exc}") from exc

    values = []
    pos = 0
    for _ in range(_CONFIG_FIELDS):
        match = _INT_PATTERN.match(text, pos)
        if match is None:
            raise ConfigError(
                f"invalid configuration format in {path}: expected {_CONFIG_FIELDS} integers"
            )
        values.append(int(match.group(1)))
        pos = match.end()
    return Config(*values)