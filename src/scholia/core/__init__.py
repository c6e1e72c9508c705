"""Domain model, ports and error types."""
