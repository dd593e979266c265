"""Domain helpers for chirp validation and cleaning."""
from __future__ import annotations

PROFANE_WORDS = {"kerfuffle", "sharbert", "fornax"}
CENSORED = "****"


def is_valid_chirp(body: str | None, max_length: int) -> bool:
    """Return True when the body fits within ``max_length`` characters."""
    if body is None:
        return False
    return len(body) <= max_length


def clean_body(body: str) -> str:
    """Replace profane words (case-insensitive, whole words only) with asterisks."""
    words = body.split(" ")
    return " ".join(CENSORED if word.lower() in PROFANE_WORDS else word for word in words)
