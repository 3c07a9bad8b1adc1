import random

import pytest

from deichain.models import Transaction
from deichain.pool import PoolFullError, TransactionPool, create_transaction


def _tx(tx_id, value=1):
    return Transaction(id=tx_id, value=value)


def test_add_increases_length():
    pool = TransactionPool(3)
    pool.add(_tx(10))
    pool.add(_tx(11))
    assert len(pool) == 2


def test_add_to_full_pool_raises():
    pool = TransactionPool(2)
    pool.add(_tx(1))
    pool.add(_tx(2))
    with pytest.raises(PoolFullError):
        pool.add(_tx(3))
    assert len(pool) == 2


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TransactionPool(0)


def test_occupancy_is_fraction_of_capacity():
    pool = TransactionPool(4)
    assert pool.occupancy() == 0.0
    for i in range(4):
        pool.add(_tx(i))
    assert pool.occupancy() == 1.0


def test_take_requires_enough_transactions():
    pool = TransactionPool(5)
    pool.add(_tx(1))
    pool.add(_tx(2))
    assert pool.take(3) == []


def test_take_returns_in_slot_order_without_removing():
    pool = TransactionPool(5)
    for i in (7, 8, 9):
        pool.add(_tx(i))
    taken = pool.take(2)
    assert [tx.id for tx in taken] == [7, 8]
    assert len(pool) == 3


def test_take_skips_duplicate_ids():
    pool = TransactionPool(5)
    for i in (4, 4, 5):
        pool.add(_tx(i))
    taken = pool.take(2)
    assert [tx.id for tx in taken] == [4, 5]


def test_take_returns_copies():
    pool = TransactionPool(2)
    pool.add(_tx(1))
    taken = pool.take(1)
    taken[0].value = 99
    assert pool.reward([1]) == 1


def test_remove_counts_and_ages_remaining():
    pool = TransactionPool(4)
    for i in (1, 2, 3):
        pool.add(_tx(i))
    removed = pool.remove([1, 3, 42])
    assert removed == 2
    assert len(pool) == 1
    assert pool.ages() == [1]
    pool.remove([])
    assert pool.ages() == [2]


def test_freed_slot_is_reused_first():
    pool = TransactionPool(3)
    for i in (1, 2, 3):
        pool.add(_tx(i))
    pool.remove([1])
    pool.add(_tx(4))
    assert [tx.id for tx in pool.take(3)] == [4, 2, 3]


def test_reward_sums_matching_values():
    pool = TransactionPool(4)
    pool.add(_tx(1, value=2))
    pool.add(_tx(2, value=3))
    pool.add(_tx(3, value=1))
    assert pool.reward([1, 2]) == 5
    assert pool.reward([]) == 0


def test_pool_as_context_manager():
    pool = TransactionPool(2)
    with pool as held:
        held.add(_tx(1))
        assert len(held) == 1


def test_create_transaction_fields():
    rng = random.Random(1)
    tx = create_transaction(5, 2, sender_id=1000, rng=rng)
    assert tx.id == 1005
    assert tx.sender_id == 1000
    assert tx.value == 2
    assert tx.age == 0
    assert 1 <= tx.quant <= 10
    assert 0 <= tx.receiver_id <= 2**31 - 1


def test_create_transaction_is_reproducible_with_seed():
    first = create_transaction(0, 1, sender_id=1, rng=random.Random(3))
    second = create_transaction(0, 1, sender_id=1, rng=random.Random(3))
    assert (first.receiver_id, first.quant) == (second.receiver_id, second.quant)