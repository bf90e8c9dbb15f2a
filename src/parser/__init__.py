"""Natural-language query parsing."""
