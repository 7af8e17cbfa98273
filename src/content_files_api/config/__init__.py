"""
Configuration management for the Content Files API.

Contains the Pydantic settings that select and configure the blob storage
backend (local filesystem, S3 or Azure Blob Storage).
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
