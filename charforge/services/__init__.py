"""Application services for CharForge."""
