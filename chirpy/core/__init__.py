"""
Core utilities shared across the Chirpy API.

This package hosts configuration helpers (env vars, paths, secrets), logging
setup and password hashing. Routers and services depend on these primitives
instead of reading os.environ or importing argon2 directly.
"""
