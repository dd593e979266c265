"""
High-level use cases for the Chirpy API.

Each service module orchestrates the repository and core helpers to implement
business rules (post a chirp, log in, refresh or revoke a token, etc.).

Routers (FastAPI endpoints) call these services instead of touching the JSON
document or decoding tokens directly.
"""
