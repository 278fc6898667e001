"""
Member Search API - member search and statistics aggregation service.

This package provides a FastAPI-based backend that merges member profiles,
skills, statistics and verification status from several independent sources.
"""

__version__ = "1.0.0"
