"""Adapters – httpx roster client and FastAPI integration."""
