"""Market data synchronization and trading signal backend."""
