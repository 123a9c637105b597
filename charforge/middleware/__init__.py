"""ASGI middleware for CharForge."""
