"""Task protocol: envelopes, task lifecycle, request handling."""
