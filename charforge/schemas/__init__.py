"""Pydantic schemas for CharForge API requests, responses and catalog records."""
