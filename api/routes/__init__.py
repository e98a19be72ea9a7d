"""API route handlers."""

from api.routes import claims, health, root

__all__ = ["health", "root", "claims"]
