"""Periodic digests."""
