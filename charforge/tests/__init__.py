"""CharForge tests."""
