# FILE: app/sites/schemas.py
"""
Site Store data shapes.

SiteMetadata is the on-disk sidecar (config.json, camelCase keys) and is
validated with pydantic on every read. SiteRecord and SiteFile are the
reconstructed views handed to callers.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SiteMetadata(BaseModel):
    """Sidecar schema: {id, name, description, createdAt, updatedAt, generator}."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    description: str = ""
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    generator: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps from hand-edited sidecars are read as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


@dataclass
class SiteRecord:
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    generator: str
    file_size: int
    url: str = ""

    @property
    def path(self) -> str:
        return self.id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "path": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "generator": self.generator,
            "fileSize": self.file_size,
            "url": self.url,
        }


@dataclass
class SiteFile:
    name: str
    type: str  # "file" | "directory"
    size: int
    modified_at: datetime

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "modifiedAt": self.modified_at.isoformat(),
        }


# =============================================================================
# REQUEST MODELS
# =============================================================================

class DeployRequest(BaseModel):
    html: str = Field(..., description="Complete HTML document")
    path: Optional[str] = Field(None, description="Site path; generated when omitted")
    name: Optional[str] = None
    description: Optional[str] = None


class UpdateContentRequest(BaseModel):
    html: str


class UpdateMetadataRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


__all__ = [
    "SiteMetadata",
    "SiteRecord",
    "SiteFile",
    "DeployRequest",
    "UpdateContentRequest",
    "UpdateMetadataRequest",
]
