"""Query resolution pipeline and response formatting."""
