"""Ports of the ledgernet driver."""
