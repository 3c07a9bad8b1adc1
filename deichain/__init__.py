"""Proof-of-work blockchain simulation: transaction pool, miners, validators, statistics and a controller."""

__version__ = "0.1.0"