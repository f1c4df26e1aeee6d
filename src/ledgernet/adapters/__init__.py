"""Adapters binding ports to concrete tools."""
