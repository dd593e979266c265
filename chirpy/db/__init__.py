"""Record model (Post, User, Document) and the JSON document codec."""

from .models import Document, Post, User

__all__ = ["Document", "Post", "User"]
