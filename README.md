# deichain

A small proof-of-work blockchain simulation. A controller runs miner threads
that take transactions from a shared pool, build candidate blocks, search for
a nonce whose SHA-256 hash meets the required difficulty and hand the block to
a validator. The validator appends the block to the chain when its id follows
the current chain, credits the miner with the summed value of the block's
transactions, and removes those transactions from the pool; every transaction
left in the pool ages by one. A statistics collector keeps per-miner counts of
valid and invalid blocks and the credits each miner has earned. Transaction
generators feed the pool at a fixed interval.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

The configuration file holds four whitespace-separated integers, in this
order:

1. number of miners
2. transaction pool size
3. transactions per block
4. maximum number of blocks in the chain

Anything after the fourth integer is ignored. For example, `config.cfg`:

```
3 20 4 10
```

A file that is missing or does not start with four integers raises
`deichain.models.ConfigError`.

## Running

```
deichain config.cfg -g 2:500 -g 1:800
```

Options:

- `config_file` – the configuration file described above.
- `-g VALUE:INTERVAL_MS`, `--generator VALUE:INTERVAL_MS` – run a
  transaction generator that adds a transaction of reward `VALUE` to the
  pool every `INTERVAL_MS` milliseconds. May be repeated. Without at least
  one generator the pool stays empty and no block is ever mined.
- `--log-file PATH` – file to append log lines to (default
  `DEIChain_log.txt`).

The controller loads the configuration, creates the transaction pool and the
chain, mines a genesis block, and starts the statistics collector, one
validator, the miners, the generators and a monitor that adjusts the number
of validators. It runs until it receives Ctrl+C (SIGINT) or a validator finds
the chain full. On shutdown it logs the final statistics report. Sending
SIGUSR1, where the platform has it, logs the current report without
stopping.

Every log line is printed with a `[YYYY-MM-DD HH:MM:SS]` timestamp and also
appended to the log file (`deichain.logs.log_message`).

Each miner waits 5 to 14 seconds between attempts, and a validator pauses 3
seconds after each block it handles.

### Validator scaling

Every 2 seconds the controller checks how full the transaction pool is and
starts or stops extra validators to match:

| pool occupancy | validators |
|----------------|------------|
| below 60 %     | 1          |
| 60 % to 80 %   | 2          |
| 80 % and above | 3          |

`deichain.controller.required_validators(occupancy)` gives this number for a
fraction between 0 and 1.

## Proof of work

The difficulty a block must meet depends on the highest transaction reward
it carries (`deichain.pow.difficulty_from_reward`):

| max reward | level    | hash must start with                |
|------------|----------|-------------------------------------|
| 1 or less  | `EASY`   | `0000` followed by `0`–`b`          |
| 2          | `NORMAL` | `00000`                             |
| 3 or more  | `HARD`   | `00000` followed by `0`–`b`         |

`proof_of_work(block, max_ops)` searches nonces from zero upwards, sets
`block.nonce`, and returns a `PoWResult` (`hash`, `elapsed_time`,
`operations`, `error`); when no nonce up to `max_ops` works, `error` is set.
`verify_nonce(block)` checks a block that has already been mined, and
`check_difficulty(hash_hex, reward)` checks a hex digest on its own.
`serialize_block` and `compute_sha256` give the bytes that are hashed and
their digest.

## Using the library

```python
import random

from deichain.models import read_config
from deichain.pool import TransactionPool, create_transaction
from deichain.chain import Blockchain

config = read_config("config.cfg")
rng = random.Random(7)

pool = TransactionPool(config.pool_size)
pool.add(create_transaction(0, 2, 1000, rng))
print(len(pool), pool.occupancy())

chain = Blockchain.with_genesis(config.blockchain_blocks, config.transactions_per_block, rng)
print(len(chain), chain.next_block_id(), chain.last_block_hash())
```

The modules:

- `deichain.models` – `Config`, `Transaction`, `Block`, `BlockSubmission`,
  `ConfigError` and `read_config`.
- `deichain.logs` – `log_message` and `format_log_line`.
- `deichain.pool` – `TransactionPool` with `add`, `take`, `remove`,
  `reward`, `ages` and `occupancy`; adding to a full pool raises
  `PoolFullError`. `create_transaction` builds a new transaction.
- `deichain.chain` – `Blockchain` with `with_genesis`, `append`, `is_full`,
  `last_block_hash`, `next_block_id` and `blocks`; appending to a full chain
  raises `ChainFullError`.
- `deichain.pow` – hashing, difficulty checks, proof of work, and
  `generate_random_transaction` / `generate_random_block`.
- `deichain.miner` – `Miner`, one mining worker (`mine_once`, `run`).
- `deichain.validator` – `Validator`, which checks and records submitted
  blocks (`validate`, `run`).
- `deichain.stats` – `Statistics` (`record`, `report`,
  `average_verification_time`, `consume`), `StatsMessage` and `MessageType`.
- `deichain.generator` – `TransactionGenerator` (`step`, `run`).
- `deichain.controller` – `Controller` (`start`, `stop`,
  `adjust_validators`), `required_validators`, `parse_generator_spec`, and
  `main`, the entry point of the `deichain` command.

## What it does not do

- Everything runs in one process as threads; miners, validators,
  generators and statistics share in-memory objects. There is no separate
  generator command: generators are started by the controller through `-g`.
- Nothing is stored: the chain and the pool live only while the command
  runs.
- A validator accepts a block when its id equals the current chain length.
  It does not re-check the block's nonce or previous hash; `verify_nonce` is
  available for that but is not called by the validator.