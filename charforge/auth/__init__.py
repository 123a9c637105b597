"""
Authentication package for CharForge.

fastapi-users configuration, Argon2 password hashing and the /auth endpoints.
"""
