"""TTL cache store shared by parser and search results."""
