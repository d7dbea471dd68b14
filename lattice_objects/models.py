"""Data models for the lattice-objects client."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectionParameters(BaseModel):
    """Where the object store lives and which tokens to present to it."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Base URL of the Lattice environment")
    vm_token: str = Field(..., description="Bearer token sent as authorization")
    env_token: str = Field(
        ..., description="Bearer token sent as anduril-sandbox-authorization"
    )

    @field_validator("base_url", "vm_token", "env_token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ContentIdentifier(BaseModel):
    """Identifies the content stored at a path."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    path: str = Field(..., description="Object path")
    checksum: Optional[str] = Field(None, description="Checksum of the object content")


class PathMetadata(BaseModel):
    """Metadata describing a stored object."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content_identifier: ContentIdentifier = Field(..., alias="contentIdentifier")
    size_bytes: Optional[int] = Field(None, alias="sizeBytes", description="Size in bytes")
    last_updated_at: Optional[datetime] = Field(
        None, alias="lastUpdatedAt", description="Last modification timestamp"
    )
    expiry_time: Optional[datetime] = Field(
        None, alias="expiryTime", description="When the object expires, if it has a TTL"
    )

    @property
    def path(self) -> str:
        """Object path."""
        return self.content_identifier.path

    def to_json(self) -> str:
        """Serialize with the service's field names, omitting absent fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class ListResponse(BaseModel):
    """One page of a listing."""

    model_config = ConfigDict(populate_by_name=True)

    path_metadatas: List[PathMetadata] = Field(default_factory=list, alias="pathMetadatas")
    next_page_token: Optional[str] = Field(
        None, alias="nextPageToken", description="Token for the next page, empty on the last"
    )
