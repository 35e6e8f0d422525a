# FILE: app/sites/__init__.py
"""Deployed site storage (filesystem) and its HTTP routes."""

from app.sites.service import (
    SiteStore,
    SiteStoreError,
    InvalidPathError,
    PathAlreadyExistsError,
    SiteNotFoundError,
    PayloadTooLargeError,
    validate_site_path,
)
from app.sites.schemas import SiteFile, SiteMetadata, SiteRecord

__all__ = [
    "SiteStore",
    "SiteStoreError",
    "InvalidPathError",
    "PathAlreadyExistsError",
    "SiteNotFoundError",
    "PayloadTooLargeError",
    "validate_site_path",
    "SiteFile",
    "SiteMetadata",
    "SiteRecord",
]
