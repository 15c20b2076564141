"""
Gallery Upload Gateway - a thin HTTP front for photo-gallery storage.

This package contains the complete application:
- core: Framework-agnostic gallery logic (paths, auth, album/image operations)
- infrastructure: Object store integrations (GCS, S3-compatible, in-memory)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
