"""HTTP adapter: thin FastAPI routes over the domain services."""
