"""Domain contracts independent of the storage backend."""
