"""Outbound delivery of digests."""
