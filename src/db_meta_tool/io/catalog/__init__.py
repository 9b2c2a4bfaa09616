"""Read-only access to the database catalog."""

from .reader import CatalogReader

__all__ = ["CatalogReader"]
