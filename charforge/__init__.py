"""
CharForge - a character-creation service for 5th edition tabletop characters.

The package exposes a FastAPI application (see ``charforge.main``) that
authenticates users, proxies the public rules-reference catalog, owns the
per-user character wizard state and persists finished characters.
"""

__version__ = "0.1.0"
