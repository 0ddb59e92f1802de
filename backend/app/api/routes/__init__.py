"""API routes package."""

from app.api.routes import ai, chat, files, pdf

__all__ = [
    "ai",
    "chat",
    "files",
    "pdf",
]
