"""Block hashing and proof of work with reward-dependent difficulty."""

from __future__ import annotations

import hashlib
import random
import struct
import time
from dataclasses import dataclass
from enum import IntEnum

from .models import HASH_SIZE, Block, Transaction

POW_MAX_OPS = 10_000_000
MIN_LEADING_ZEROS = 4
INITIAL_HASH = "00006a8e76f31ba74e21a092cca1015a418c9d5f4375e7a4fec676e1d2ec1436"

# Little-endian layout: block id, NUL-padded previous hash, timestamp,
# each transaction's fields in declaration order, then the nonce.
_HEADER = struct.Struct(f"<i{HASH_SIZE}sq")
_TRANSACTION = struct.Struct("<iiiiiqi")
_NONCE = struct.Struct("<I")


class DifficultyLevel(IntEnum):
    EASY = 1
    NORMAL = 2
    HARD = 3


@dataclass
class PoWResult:
    """Outcome of a proof-of-work search."""

    hash: str = ""
    elapsed_time: float = 0.0
    operations: int = 0
    error: bool = False


def difficulty_from_reward(reward: int) -> DifficultyLevel:
    """Map the highest transaction reward in a block to a difficulty level."""
    if reward <= 1:
        return DifficultyLevel.EASY
    if reward == 2:
        return DifficultyLevel.NORMAL
    return DifficultyLevel.HARD


def max_transaction_reward(block: Block) -> int:
    """Return the highest transaction value in *block*, or 0 when it has none."""
    return max((tx.value for tx in block.transactions), default=0)


def _header_bytes(block: Block) -> bytes:
    prev = block.previous_hash.encode("ascii")[:HASH_SIZE]
    parts = [_HEADER.pack(block.id, prev, block.timestamp)]
    parts.extend(
        _TRANSACTION.pack(
            tx.id, tx.value, tx.sender_id, tx.receiver_id, tx.quant, tx.timestamp, tx.age
        )
        for tx in block.transactions
    )
    return b"".join(parts)


def serialize_block(block: Block) -> bytes:
    """Return the bytes that are hashed for *block*."""
    return _header_bytes(block) + _NONCE.pack(block.nonce & 0xFFFFFFFF)


def compute_sha256(block: Block) -> str:
    """Return the lowercase hex SHA-256 digest of the serialized block."""
    return hashlib.sha256(serialize_block(block)).hexdigest()


def check_difficulty(hash_hex: str, reward: int) -> bool:
    """Tell whether *hash_hex* meets the difficulty implied by *reward*.

    EASY needs ``0000`` followed by a digit or ``a``-``b``; NORMAL needs
    ``00000``; HARD needs ``00000`` followed by a digit or ``a``-``b``.
    """
    zeros = len(hash_hex) - len(hash_hex.lstrip("0"))
    if zeros < MIN_LEADING_ZEROS:
        return False
    next_char = hash_hex[zeros] if zeros < len(hash_hex) else ""

    difficulty = difficulty_from_reward(reward)
    if difficulty is DifficultyLevel.EASY:
        return zeros > 4 or next_char <= "b"
    if difficulty is DifficultyLevel.NORMAL:
        return zeros >= 5
    return zeros > 5 or (zeros == 5 and next_char <= "b")


def verify_nonce(block: Block) -> bool:
    """Tell whether the block's current nonce satisfies its difficulty."""
    return check_difficulty(compute_sha256(block), max_transaction_reward(block))


def proof_of_work(block: Block, max_ops: int = POW_MAX_OPS) -> PoWResult:
    """Search nonces from zero upward until the block's hash meets its difficulty.

    ``block.nonce`` is updated in place. When no nonce up to *max_ops* works,
    the result has ``error`` set and the nonce is left one past the limit.
    """
    reward = max_transaction_reward(block)
    base = hashlib.sha256(_header_bytes(block))
    limit = max(max_ops, 0)
    start = time.process_time()

    for nonce in range(limit + 1):
        digest = base.copy()
        digest.update(_NONCE.pack(nonce))
        raw = digest.digest()
        if raw[0] or raw[1]:
            continue
        hash_hex = raw.hex()
        if check_difficulty(hash_hex, reward):
            block.nonce = nonce
            return PoWResult(
                hash=hash_hex,
                elapsed_time=time.process_time() - start,
                operations=nonce,
            )

    block.nonce = limit + 1
    return PoWResult(
        elapsed_time=time.process_time() - start,
        operations=limit,
        error=True,
    )


def generate_random_transaction(tx_number: int, rng: random.Random | None = None) -> Transaction:
    """Create a transaction with a random reward of 1 to 3, occasionally aged up."""
    rng = rng or random.Random()
    value = rng.randrange(3) + 1
    age_chance = rng.randrange(101)
    if age_chance <= 3:
        value += 1
    if age_chance <= 1:
        value += 1
    quant = int(rng.randrange(10000) / 100.0 + 0.01)
    return Transaction(id=tx_number, value=value, quant=quant, timestamp=int(time.time()))


def generate_random_block(
    prev_hash: str,
    block_number: int,
    transactions_per_block: int,
    rng: random.Random | None = None,
) -> Block:
    """Build a block of random transactions and mine it, retrying on failure."""
    rng = rng or random.Random()
    block = Block(
        id=block_number,
        transactions=tuple(
            generate_random_transaction(i, rng) for i in range(transactions_per_block)
        ),
        previous_hash=prev_hash,
    )
    while True:
        block.timestamp = int(time.time())
        if not proof_of_work(block).error:
            return block