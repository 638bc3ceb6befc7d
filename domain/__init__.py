"""
Domain layer - Enums, labels, slugs and schemas.
"""

from domain import enums, labels, schemas, slug

__all__ = ["enums", "labels", "schemas", "slug"]
