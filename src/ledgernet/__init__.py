"""ledgernet: lifecycle driver for a containerised ledger test network."""

__version__ = "1.4.0"
