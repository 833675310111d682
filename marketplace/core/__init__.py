"""
Core utilities shared across the marketplace API.

This package hosts configuration helpers (env vars, storage paths, feature
flags), the error taxonomy, logging setup and password hashing. Services and
routers depend on these primitives instead of reading os.environ directly.
"""
