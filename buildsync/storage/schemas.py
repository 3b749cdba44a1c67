"""
Pydantic models for storage service payloads.

Only the fields the sync logic relies on are declared; everything else the
service reports is kept as extra attributes and passed through untouched.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RemoteEntry(BaseModel):
    """One file record from the storage inventory."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="File name on the storage service")
    md5: str = Field(..., description="Hex MD5 digest of the stored content")


class Inventory(BaseModel):
    """Body of ``GET /rest/v1/storage/{account}``."""

    model_config = ConfigDict(extra="allow")

    files: List[RemoteEntry]


class UploadResult(BaseModel):
    """Body of a successful ``POST /rest/v1/storage/{account}/{name}``."""

    model_config = ConfigDict(extra="allow")

    md5: str = Field(..., description="Hex MD5 digest computed by the service")
