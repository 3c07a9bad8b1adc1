"""Controller that runs miners, validators, generators and statistics together."""

from __future__ import annotations

import argparse
import functools
import queue
import signal
import sys
import threading
from typing import Callable, Iterable

from .chain import Blockchain
from .generator import TransactionGenerator
from .logs import DEFAULT_LOG_PATH, log_message
from .miner import Miner
from .models import Config, ConfigError, read_config
from .pool import TransactionPool
from .pow import INITIAL_HASH, generate_random_block
from .stats import Statistics
from .validator import Validator

MAX_VALIDATORS = 3
MONITOR_INTERVAL = 2.0


def required_validators(occupancy: float) -> int:
    """Return how many validators should run at the given pool occupancy."""
    if occupancy >= 0.8:
        return 3
    if occupancy >= 0.6:
        return 2
    return 1


def parse_generator_spec(spec: str) -> tuple[int, int]:
    """Parse ``VALUE:INTERVAL_MS`` into a pair of integers."""
    value_text, sep, interval_text = spec.partition(":")
    if not sep:
        raise ValueError(f"generator spec must be VALUE:INTERVAL_MS, got {spec!r}")
    try:
        value = int(value_text)
        interval = int(interval_text)
    except ValueError as exc:
        raise ValueError(f"generator spec must hold two integers, got {spec!r}") from exc
    if interval < 0:
        raise ValueError(f"generator interval must not be negative, got {interval}")
    return value, interval


class Controller:
    """Owns the pool, chain and statistics and the threads working on them."""

    def __init__(
        self,
        config: Config,
        log: Callable[[str], object] | None = None,
        generators: Iterable[tuple[int, int]] = (),
    ) -> None:
        self.config = config
        self._log = log or log_message
        self.pool = TransactionPool(config.pool_size)
        self.chain = Blockchain(config.blockchain_blocks)
        self.stats = Statistics()
        self.submissions: queue.Queue = queue.Queue()
        self.stats_queue: queue.Queue = queue.Queue()
        self.shutdown = threading.Event()
        self._generator_specs = list(generators)
        self._validators: list[tuple[threading.Thread, threading.Event] | None] = [
            None
        ] * MAX_VALIDATORS
        self._validator_lock = threading.Lock()
        self._workers: list[threading.Thread] = []
        self._monitor: threading.Thread | None = None
        self._stats_thread: threading.Thread | None = None
        self._stats_stop = threading.Event()
        self._started = False

    def _launch_validator(self, index: int) -> None:
        validator = Validator(
            self.chain,
            self.pool,
            self.config,
            self.stats_queue,
            self._log,
            self.shutdown.set,
        )
        stop = threading.Event()
        thread = threading.Thread(
            target=validator.run,
            args=(self.submissions, stop),
            name=f"validator-{index + 1}",
            daemon=True,
        )
        thread.start()
        self._validators[index] = (thread, stop)

    def _halt_validator(self, index: int) -> None:
        slot = self._validators[index]
        if slot is None:
            return
        thread, stop = slot
        stop.set()
        thread.join()
        self._validators[index] = None

    def adjust_validators(self) -> int:
        """Start or stop extra validators to match pool occupancy; return the target count."""
        occupancy = self.pool.occupancy()
        required = required_validators(occupancy)
        with self._validator_lock:
            for index in range(1, required):
                if self._validators[index] is None:
                    self._launch_validator(index)
                    self._log(
                        f"Controller: Validator {index + 1} launched (occupancy {occupancy:.2f})"
                    )
            for index in range(required, MAX_VALIDATORS):
                if self._validators[index] is not None:
                    self._halt_validator(index)
                    self._log(
                        f"Controller: Validator {index + 1} terminated (occupancy {occupancy:.2f})"
                    )
        return required

    def _monitor_loop(self) -> None:
        while not self.shutdown.wait(MONITOR_INTERVAL):
            self.adjust_validators()

    def _spawn(self, target, name: str) -> None:
        thread = threading.Thread(target=target, args=(self.shutdown,), name=name, daemon=True)
        thread.start()
        self._workers.append(thread)

    def start(self) -> None:
        """Create the genesis block if needed and start every worker thread."""
        if self._started:
            raise RuntimeError("controller already started")
        self._started = True

        if len(self.chain) == 0:
            genesis = generate_random_block(
                INITIAL_HASH, 0, self.config.transactions_per_block
            )
            self.chain.append(genesis)
            self._log(
                f"Genesis block created with ID: {genesis.id}, nonce {genesis.nonce}, "
                f"ts {genesis.timestamp}"
            )

        self._stats_thread = threading.Thread(
            target=self.stats.consume,
            args=(self.stats_queue, self._stats_stop, self._log),
            name="statistics",
            daemon=True,
        )
        self._stats_thread.start()
        self._log("Statistics: Process started")

        with self._validator_lock:
            self._launch_validator(0)

        for miner_id in range(1, self.config.num_miners + 1):
            miner = Miner(
                miner_id, self.pool, self.chain, self.config, self.submissions, self._log
            )
            self._spawn(miner.run, f"miner-{miner_id}")

        for number, (value, interval_ms) in enumerate(self._generator_specs, start=1):
            generator = TransactionGenerator(
                self.pool, value, interval_ms, log=self._log
            )
            self._spawn(generator.run, f"generator-{number}")

        self._monitor = threading.Thread(
            target=self._monitor_loop, name="validator-monitor", daemon=True
        )
        self._monitor.start()

    def stop(self) -> list[str]:
        """Stop every worker, log the final statistics and return the report lines."""
        self.shutdown.set()
        if self._monitor is not None:
            self._monitor.join()
            self._monitor = None

        self._log("Controller: Shutting down miners...")
        for thread in self._workers:
            thread.join()
        self._workers.clear()

        self._log("Controller: Shutting down validator...")
        with self._validator_lock:
            for index in range(MAX_VALIDATORS):
                self._halt_validator(index)

        self._log("Controller: Shutting down statistics...")
        self._stats_stop.set()
        if self._stats_thread is not None:
            self._stats_thread.join()
            self._stats_thread = None

        report = self.stats.report(len(self.chain), len(self.pool))
        for line in report:
            self._log(line)
        self._log("Controller: Shutdown complete")
        return report


def main(argv=None) -> int:
    """Run the simulation until interrupted."""
    parser = argparse.ArgumentParser(
        prog="deichain", description="Run the blockchain mining simulation."
    )
    parser.add_argument("config_file", help="file with miners, pool size, tx/block, blocks")
    parser.add_argument(
        "-g",
        "--generator",
        action="append",
        default=[],
        type=parse_generator_spec,
        metavar="VALUE:INTERVAL_MS",
        help="run a transaction generator (may be repeated)",
    )
    parser.add_argument("--log-file", default=DEFAULT_LOG_PATH, help="log file to append to")
    args = parser.parse_args(argv)

    log = functools.partial(log_message, log_path=args.log_file)
    try:
        config = read_config(args.config_file)
    except ConfigError as exc:
        print(f"Controller: {exc}", file=sys.stderr)
        return 1
    log(str(config))
    log("Controller: Config loaded")

    try:
        controller = Controller(config, log, args.generator)
    except ValueError as exc:
        print(f"Controller: {exc}", file=sys.stderr)
        return 1

    def _on_interrupt(signum, frame):
        controller.shutdown.set()
        log("Controller: Received SIGINT, initiating shutdown...")

    def _on_report(signum, frame):
        for line in controller.stats.report(len(controller.chain), len(controller.pool)):
            log(line)

    signal.signal(signal.SIGINT, _on_interrupt)
    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, _on_report)

    controller.start()
    while not controller.shutdown.wait(1.0):
        pass
    controller.stop()
    return 0