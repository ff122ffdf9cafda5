"""HTTP surface of the todo service."""

from .api import create_app

__all__ = ["create_app"]
