"""Pydantic schemas for document templates."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TemplateCreate(BaseModel):
    """Schema for creating a document template."""

    name: str = Field(..., min_length=1, max_length=255)
    name_bn: str | None = Field(None, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    category: str = Field(..., min_length=1, max_length=100)
    category_bn: str | None = Field(None, max_length=100)
    description: str | None = None
    description_bn: str | None = None
    template: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    required_credits: int = Field(1, ge=0)
    is_active: bool = True
    is_default: bool = False
    version: str = Field("1.0", max_length=20)


class TemplateUpdate(BaseModel):
    """Schema for updating a document template."""

    name: str | None = Field(None, min_length=1, max_length=255)
    name_bn: str | None = Field(None, max_length=255)
    type: str | None = Field(None, min_length=1, max_length=50)
    category: str | None = Field(None, min_length=1, max_length=100)
    category_bn: str | None = Field(None, max_length=100)
    description: str | None = None
    description_bn: str | None = None
    template: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None
    tags: list[str] | None = None
    required_credits: int | None = Field(None, ge=0)
    is_active: bool | None = None
    is_default: bool | None = None
    version: str | None = Field(None, max_length=20)


class TemplateResponse(TemplateCreate):
    """Schema for template response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_favorite: bool
    usage_count: int
    last_used_at: datetime | None
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class TemplateStats(BaseModel):
    """Template usage numbers."""

    total: int
    active: int
    popular: int
    total_usage: int
    favorites: int
