import hashlib
import random

import pytest

from deichain.models import Block, Transaction
from deichain.pow import (
    INITIAL_HASH,
    DifficultyLevel,
    PoWResult,
    check_difficulty,
    compute_sha256,
    difficulty_from_reward,
    generate_random_block,
    generate_random_transaction,
    max_transaction_reward,
    proof_of_work,
    serialize_block,
    verify_nonce,
)


def make_block(values, nonce=0, block_id=1):
    txs = tuple(
        Transaction(id=10 + i, value=v, sender_id=4, receiver_id=5, quant=6, timestamp=1700000000)
        for i, v in enumerate(values)
    )
    return Block(
        id=block_id,
        transactions=txs,
        timestamp=1700000000,
        nonce=nonce,
        previous_hash=INITIAL_HASH,
    )


@pytest.mark.parametrize(
    "reward, level",
    [
        (0, DifficultyLevel.EASY),
        (1, DifficultyLevel.EASY),
        (2, DifficultyLevel.NORMAL),
        (3, DifficultyLevel.HARD),
        (5, DifficultyLevel.HARD),
    ],
)
def test_difficulty_from_reward(reward, level):
    assert difficulty_from_reward(reward) is level


@pytest.mark.parametrize(
    "hash_hex, reward, expected",
    [
        ("0000b" + "f" * 59, 1, True),
        ("00009" + "f" * 59, 1, True),
        ("0000c" + "f" * 59, 1, False),
        ("000f" + "f" * 60, 1, False),
        ("00000f" + "f" * 58, 2, True),
        ("0000a" + "f" * 59, 2, False),
        ("00000b" + "f" * 58, 3, True),
        ("00000c" + "f" * 58, 3, False),
        ("000000f" + "f" * 57, 3, True),
        ("0" * 64, 3, True),
    ],
)
def test_check_difficulty(hash_hex, reward, expected):
    assert check_difficulty(hash_hex, reward) is expected


def test_initial_hash_meets_easy_difficulty():
    assert check_difficulty(INITIAL_HASH, 1) is True
    assert check_difficulty(INITIAL_HASH, 2) is False


def test_max_transaction_reward():
    assert max_transaction_reward(make_block([1, 3, 2])) == 3
    assert max_transaction_reward(make_block([])) == 0


def test_serialize_block_ends_with_nonce():
    block = make_block([1, 2], nonce=7)
    data = serialize_block(block)
    assert data[-4:] == (7).to_bytes(4, "little")
    assert data[:4] == (1).to_bytes(4, "little")


def test_serialize_block_only_nonce_changes_tail():
    a = serialize_block(make_block([1, 2], nonce=1))
    b = serialize_block(make_block([1, 2], nonce=2))
    assert len(a) == len(b)
    assert a[:-4] == b[:-4]
    assert a[-4:] != b[-4:]


def test_serialize_block_grows_with_transactions():
    one = serialize_block(make_block([1]))
    two = serialize_block(make_block([1, 1]))
    three = serialize_block(make_block([1, 1, 1]))
    assert len(three) - len(two) == len(two) - len(one)
    assert len(two) > len(one)


def test_compute_sha256_is_digest_of_serialization():
    block = make_block([2, 1], nonce=42)
    digest = compute_sha256(block)
    assert digest == hashlib.sha256(serialize_block(block)).hexdigest()
    assert len(digest) == 64


def test_proof_of_work_finds_valid_nonce():
    block = make_block([1])
    result = proof_of_work(block)
    assert result.error is False
    assert result.hash == compute_sha256(block)
    assert result.hash.startswith("0000")
    assert result.operations == block.nonce
    assert verify_nonce(block) is True


def test_proof_of_work_gives_up_after_limit():
    block = make_block([3, 3])
    result = proof_of_work(block, max_ops=3)
    assert result.error is True
    assert result.hash == ""
    assert result.operations == 3
    assert block.nonce == 4


def test_verify_nonce_rejects_other_nonce():
    block = make_block([1])
    proof_of_work(block)
    block.nonce += 1
    assert verify_nonce(block) is False


def test_pow_result_defaults():
    result = PoWResult()
    assert (result.hash, result.operations, result.error) == ("", 0, False)


def test_generate_random_transaction_ranges():
    rng = random.Random(1234)
    for number in range(200):
        tx = generate_random_transaction(number, rng)
        assert tx.id == number
        assert 1 <= tx.value <= 5
        assert 0 <= tx.quant <= 100
        assert tx.age == 0


def test_generate_random_transaction_is_reproducible():
    first = [generate_random_transaction(i, random.Random(7)) for i in range(3)]
    second = [generate_random_transaction(i, random.Random(7)) for i in range(3)]
    assert [(t.value, t.quant) for t in first] == [(t.value, t.quant) for t in second]


def test_generate_random_block_is_mined():
    block = generate_random_block(INITIAL_HASH, 0, 0, random.Random(3))
    assert block.id == 0
    assert block.previous_hash == INITIAL_HASH
    assert block.transactions == ()
    assert verify_nonce(block) is True