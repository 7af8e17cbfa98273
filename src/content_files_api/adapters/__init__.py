"""
Adapter layer for the Content Files API.

Contains the blob storage adapters (local filesystem, S3, Azure Blob Storage)
behind a single interface, and the factory choosing one from settings.
"""
