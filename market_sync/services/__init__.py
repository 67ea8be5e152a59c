"""Domain services: synchronization, valuation, signals and insights."""
