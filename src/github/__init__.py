"""GitHub search query building and execution."""
