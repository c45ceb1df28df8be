"""Append-only audit log of dispatch attempts."""
