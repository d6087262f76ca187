"""
Catalog API: Category Schemas
===============================

What:  Pydantic models for the category API contract and the record shape
       every repository returns.

    CategoryInput  request body for POST/PUT /categories
    Category       the record: id, name, description

All CategoryInput fields are optional. A missing name is reported by the
service layer as "Name is required", not by FastAPI as a schema error.
A present field of the wrong JSON type is a schema error (strict mode).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryInput(BaseModel):
    """Body of a category create or update request."""

    name: Optional[str] = Field(default=None, description="Unique category name")
    description: Optional[str] = Field(default=None, description="Free text")

    model_config = ConfigDict(strict=True)


class Category(BaseModel):
    """
    A category as stored and as returned by the API.

    Also used as the read-only snapshot embedded in products.
    """

    id: int = Field(description="Store-assigned identifier")
    name: str = Field(description="Unique category name")
    description: str = Field(default="", description="Free text description")

    model_config = {"from_attributes": True, "frozen": True}
