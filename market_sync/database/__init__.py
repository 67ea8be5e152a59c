"""Storage adapters: MongoDB records and Redis counters."""
