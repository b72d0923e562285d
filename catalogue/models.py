"""Pydantic models for catalogue records and persisted entries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductRating(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: float = Field(0, ge=0, le=5)
    count: int = Field(0, ge=0)


class Product(BaseModel):
    """A catalogue record. The engines never mutate products."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    price: float = Field(..., ge=0)
    description: str = ""
    category: str = ""
    image: str = ""
    rating: ProductRating = Field(default_factory=ProductRating)


class CartEntry(BaseModel):
    product: Product
    quantity: int = Field(..., ge=1)
