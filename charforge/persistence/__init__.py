"""Persistence layer for CharForge."""
