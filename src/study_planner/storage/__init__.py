"""BlobStore implementations: in-memory, JSON file, SQLite."""
