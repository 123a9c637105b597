"""Shared utilities for CharForge."""
