"""Database models and utilities for the media catalog."""

from .db_models import AttachmentModel, Base

__all__ = ["AttachmentModel", "Base"]
