"""
HTTP API routers for CharForge: reference catalog, saved characters and the
creation wizard.
"""
