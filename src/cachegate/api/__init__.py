"""HTTP API for cachegate (FastAPI)."""
