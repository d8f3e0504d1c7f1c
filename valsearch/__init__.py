"""Val Town full-text search: incremental sync of the remote val collection into a local FTS index."""

__version__ = "1.0.0"
