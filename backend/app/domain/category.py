"""
Category Domain Model

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class Category(BaseModel):
    """Product category shown in the storefront"""

    id: str = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    description: str = Field("", description="Category description")
    image_url: str = Field("/placeholder.svg", description="Category image URL")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class CategoryCreate(BaseModel):
    """Schema for creating a category (all fields required)"""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)


class CategoryUpdate(BaseModel):
    """Schema for updating a category"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = Field(None, min_length=1)
