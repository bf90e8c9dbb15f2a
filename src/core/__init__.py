"""Shared domain models and errors."""
